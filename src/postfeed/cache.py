"""Single-file JSON cache holding the published feed of one site."""

import json
import logging
import os
import tempfile
from pathlib import Path

from filelock import FileLock, Timeout

from postfeed.errors import CacheDirectoryError, CacheWriteError
from postfeed.models import CacheDocument

logger = logging.getLogger(__name__)

FEED_SUBDIR = "jsonfeeds"
DEFAULT_LOCK_TIMEOUT = 10
FILE_MODE = 0o644


class CacheStore:
    """Owns ``<cache_dir>/jsonfeeds/<slug>.json``.

    Writes hold an exclusive lock on a sibling ``.lock`` file and swap in a
    fully written temp file, so readers that skip the lock still only ever
    see a complete document.
    """

    def __init__(self, cache_dir: Path | str, slug: str, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.directory = Path(cache_dir).expanduser() / FEED_SUBDIR
        self.path = self.directory / f"{slug}.json"
        self.lock_path = self.directory / f"{slug}.json.lock"
        self.lock_timeout = lock_timeout

    def _lock(self) -> FileLock:
        return FileLock(str(self.lock_path), timeout=self.lock_timeout)

    def _ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirectoryError(f"cannot create {self.directory}: {exc}") from exc

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> CacheDocument | None:
        """Load the document; None when missing, unreadable or corrupt."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", self.path, exc)
            return None
        try:
            return CacheDocument.from_dict(json.loads(raw))
        except (ValueError, RecursionError) as exc:
            logger.warning("Discarding corrupt cache %s: %s", self.path, exc)
            return None

    def write(self, doc: CacheDocument) -> None:
        """Replace the document on disk, raising CacheWriteError on failure."""
        self._ensure_directory()
        payload = json.dumps(doc.to_dict(), ensure_ascii=False)
        try:
            with self._lock():
                fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{self.path.name}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        fh.write(payload)
                    os.chmod(tmp, FILE_MODE)
                    os.replace(tmp, self.path)
                except BaseException:
                    Path(tmp).unlink(missing_ok=True)
                    raise
        except Timeout as exc:
            raise CacheWriteError(f"timed out waiting for lock on {self.path}") from exc
        except OSError as exc:
            raise CacheWriteError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote %d posts to %s", len(doc.posts), self.path)

    def delete(self) -> bool:
        """Remove the document. Returns False if it was absent or could not be removed."""
        if not self.path.exists():
            return False
        try:
            with self._lock():
                self.path.unlink()
        except FileNotFoundError:
            return False
        except Timeout:
            logger.warning("Timed out waiting for lock on %s", self.path)
            return False
        except OSError as exc:
            logger.warning("Cannot delete %s: %s", self.path, exc)
            return False
        return True
