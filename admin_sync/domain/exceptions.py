"""Domain-specific exceptions — framework-independent."""


class SyncError(Exception):
    """Base class for every error raised by the synchronization core."""


class EntityNotFoundError(SyncError):
    """Raised when a requested record does not exist in the collection."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class RemoteFailure(SyncError):
    """Raised when a backend call fails.

    Covers network errors, timeouts, non-success HTTP statuses and response
    bodies that do not match the expected shape. Recoverable: the cache
    degrades to fallback data and the coordinator reverts its mutation.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        status_code: int | None = None,
        timed_out: bool = False,
    ):
        self.operation = operation
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        prefix = f"[{operation}]"
        if status_code is not None:
            prefix += f" {status_code}"
        super().__init__(f"{prefix}: {message}")


class FallbackStoreCorrupt(SyncError):
    """Raised when a persisted snapshot cannot be decoded.

    Never escapes the store: a corrupt snapshot is treated as absent.
    """

    def __init__(self, resource_key: str, reason: str):
        self.resource_key = resource_key
        self.reason = reason
        super().__init__(f"Fallback snapshot '{resource_key}' is unreadable: {reason}")


class ValidationFailure(SyncError):
    """Raised before any remote call when user input is not acceptable."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message if not self.errors else f"{message}: {'; '.join(self.errors)}")
