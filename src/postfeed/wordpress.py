"""Content gateway backed by the WordPress REST API."""

import logging
from datetime import datetime, timezone

import httpx

from postfeed.errors import GatewayError, RecordNotFound
from postfeed.gateway import slug_from_url
from postfeed.models import Record, SiteMetadata

logger = logging.getLogger(__name__)

USER_AGENT = "postfeed/0.1 (JSON feed cache)"
PER_PAGE_MAX = 100
DEFAULT_LANGUAGE = "en-US"
# Statuses WordPress uses for posts that are gone or hidden from us
MISSING_STATUSES = {401, 403, 404, 410}


def _rendered(value) -> str:
    if isinstance(value, dict):
        return value.get("rendered") or ""
    return value or ""


def _parse_gmt(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _to_record(post: dict) -> Record:
    """Convert one REST post object (with `_embed`) into a Record."""
    embedded = post.get("_embedded") or {}

    authors = embedded.get("author") or []
    author = authors[0].get("name", "") if authors and isinstance(authors[0], dict) else ""

    categories = [
        term.get("name", "")
        for group in embedded.get("wp:term") or []
        for term in group or []
        if isinstance(term, dict) and term.get("taxonomy") == "category"
    ]

    image = thumbnail = ""
    media = embedded.get("wp:featuredmedia") or []
    if media and isinstance(media[0], dict):
        image = media[0].get("source_url", "")
        sizes = (media[0].get("media_details") or {}).get("sizes") or {}
        thumbnail = (sizes.get("thumbnail") or {}).get("source_url", "")

    # An empty meta object arrives as [] from PHP
    meta = post.get("meta") if isinstance(post.get("meta"), dict) else {}
    custom = {name: value if isinstance(value, list) else [value] for name, value in meta.items()}

    return Record(
        id=int(post["id"]),
        status=post.get("status", "publish"),
        title=_rendered(post.get("title")),
        link=post.get("link", ""),
        body=_rendered(post.get("content")),
        author=author,
        categories=categories,
        published=_parse_gmt(post.get("date_gmt")),
        image=image,
        thumbnail=thumbnail,
        excerpt=_rendered(post.get("excerpt")),
        custom=custom,
    )


def _convert(post) -> Record:
    """_to_record, reporting a malformed post as a GatewayError."""
    try:
        return _to_record(post)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise GatewayError(f"malformed post in response: {exc!r}") from exc


class WordPressGateway:
    """Reads posts and site info from ``<site_url>/wp-json``.

    With an application password the gateway asks for the ``edit`` context,
    which exposes trashed and draft posts; anonymously those come back as
    401/404 and are treated as gone.
    """

    def __init__(
        self,
        site_url: str,
        username: str = "",
        app_password: str = "",
        language: str = "",
        timeout: float = 10,
    ):
        self.site_url = site_url.rstrip("/")
        self.api_root = f"{self.site_url}/wp-json"
        self.auth = (username, app_password) if username and app_password else None
        self.language = language
        self.timeout = timeout

    def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        try:
            return httpx.get(
                f"{self.api_root}{path}",
                params=params,
                auth=self.auth,
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )
        except httpx.HTTPError as exc:
            raise GatewayError(f"GET {path} failed: {exc}") from exc

    @staticmethod
    def _json(resp: httpx.Response):
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GatewayError(str(exc)) from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise GatewayError(f"invalid JSON from {resp.url}") from exc

    def _params(self, **params) -> dict:
        params["_embed"] = 1
        if self.auth:
            params["context"] = "edit"
        return params

    def list_published(self, limit: int) -> list[Record]:
        """Page through published posts newest-first until `limit` are collected."""
        records: list[Record] = []
        per_page = max(1, min(PER_PAGE_MAX, limit))
        page = 1
        while len(records) < limit:
            resp = self._get(
                "/wp/v2/posts",
                self._params(status="publish", orderby="date", order="desc", per_page=per_page, page=page),
            )
            # WordPress answers 400 once `page` runs past the last page
            if resp.status_code == 400 and page > 1:
                break
            batch = self._json(resp)
            if not isinstance(batch, list):
                raise GatewayError("post listing is not a list")
            records.extend(_convert(post) for post in batch)
            try:
                total_pages = int(resp.headers.get("X-WP-TotalPages", page))
            except (TypeError, ValueError) as exc:
                raise GatewayError("bad X-WP-TotalPages header") from exc
            if not batch or page >= total_pages:
                break
            page += 1
        logger.debug("Listed %d published posts from %s", len(records), self.site_url)
        return records[:limit]

    def get_by_id(self, record_id: int) -> Record:
        resp = self._get(f"/wp/v2/posts/{record_id}", self._params())
        if resp.status_code in MISSING_STATUSES:
            raise RecordNotFound(record_id)
        post = self._json(resp)
        if not isinstance(post, dict) or "id" not in post:
            raise GatewayError(f"unexpected payload for post {record_id}")
        return _convert(post)

    def is_revision_of(self, record_id: int) -> int | None:
        """Always None: the REST API serves revisions only beneath their parent.

        Hosts delivering revision ids pass the parent on the event instead.
        """
        return None

    def _site_language(self) -> str:
        if self.language:
            return self.language
        if self.auth:
            try:
                settings = self._json(self._get("/wp/v2/settings"))
            except GatewayError as exc:
                logger.debug("No language from settings: %s", exc)
            else:
                if isinstance(settings, dict) and settings.get("language"):
                    return settings["language"].replace("_", "-")
        return DEFAULT_LANGUAGE

    def site_metadata(self) -> SiteMetadata:
        info = self._json(self._get("/"))
        if not isinstance(info, dict):
            raise GatewayError("site index is not an object")
        return SiteMetadata(
            title=info.get("name", ""),
            link=info.get("url") or self.site_url,
            description=info.get("description", ""),
            language=self._site_language(),
            slug=slug_from_url(self.site_url),
        )
