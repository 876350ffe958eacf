"""Error taxonomy for the storefront.

Every error carries a stable machine-readable ``kind`` and the HTTP status
the API layer answers with. Domain and application code raise these; only
``storefront.api.errors`` turns them into responses.
"""


class StorefrontError(Exception):
    kind = "unexpected"
    status_code = 500

    def __init__(self, message: str, **extra) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind, **self.extra}


class InvalidRequestError(StorefrontError):
    """Missing or malformed input."""

    kind = "validation"
    status_code = 400


class NotFoundError(StorefrontError):
    """Entity absent, or present under a different workspace."""

    kind = "not_found"
    status_code = 404


class StateConflictError(StorefrontError):
    """The request is well-formed but the current state does not allow it."""

    kind = "state_conflict"
    status_code = 400


class EmptyCartError(StateConflictError):
    def __init__(self, message: str = "Cart is empty") -> None:
        super().__init__(message)


class InsufficientStockError(StateConflictError):
    def __init__(self, available: int, requested: int) -> None:
        super().__init__("Insufficient stock", available=available)
        self.available = available
        self.requested = requested


class ProviderLinkError(StateConflictError):
    """Product cannot be adjusted on the external catalog provider."""


class ConcurrencyConflictError(StorefrontError):
    """A concurrent writer got there first; re-read and retry."""

    kind = "conflict"
    status_code = 409


class StaleCartError(ConcurrencyConflictError):
    def __init__(self, expected_version: int | None, current_version: int) -> None:
        super().__init__(
            "Cart was modified by another request",
            expected_version=expected_version,
            current_version=current_version,
        )


class AdjustmentInProgressError(ConcurrencyConflictError):
    def __init__(self) -> None:
        super().__init__("An adjustment with this idempotency key is already in progress")


class UpstreamError(StorefrontError):
    """An external provider call failed."""

    kind = "upstream"
    status_code = 502


class UnauthorizedError(StorefrontError):
    """Missing or wrong tool credentials."""

    kind = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)
