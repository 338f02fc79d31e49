"""Common exceptions for the cache guard and its stores."""


class StoreGuardError(RuntimeError):
    """Base error for clearer exception handling around the cache guard."""


class UnsupportedOperation(StoreGuardError):
    """Raised when ``request_all`` is asked for an id lookup or a query."""


class UnknownResourceType(StoreGuardError):
    """Raised when a store cannot resolve a type key."""

    def __init__(self, type_key: str):
        super().__init__(f"No resource type registered for {type_key!r}")
        self.type_key = type_key


class FetchFailed(StoreGuardError):
    """Error raised when a store could not fetch a collection."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
