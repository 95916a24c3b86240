class PostfeedError(Exception):
    """Base exception for all postfeed errors."""

    pass


class CacheWriteError(PostfeedError):
    """Raised when the cache document cannot be written (disk, permissions, lock timeout)."""

    pass


class CacheDirectoryError(CacheWriteError):
    """Raised when the directory holding the cache document cannot be created."""

    pass


class GatewayError(PostfeedError):
    """Raised when the content store is unreachable or answers with garbage."""

    pass


class RecordNotFound(GatewayError):
    """Raised when a record no longer exists in the content store."""

    def __init__(self, record_id: int):
        super().__init__(f"record {record_id} not found")
        self.record_id = record_id
