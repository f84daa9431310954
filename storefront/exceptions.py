"""Storefront exceptions.

All client-side errors raised by the catalog state machine, the cart store,
and the admin surface. Transport problems never escape the HTTP client as
httpx exceptions; they are translated into this hierarchy at the boundary.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront exceptions.

    All storefront errors should inherit from this class to allow
    catching them at the rendering layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize storefront error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Transport Errors
# ============================================================================


class NetworkFailure(StorefrontError):
    """Raised when a request produced no response (timeout, connection error)."""

    def __init__(self, message: str, error_code: str = "REQUEST_ERROR") -> None:
        """Initialize network failure.

        Args:
            message: Human-readable error message.
            error_code: Client-side error code (TIMEOUT or REQUEST_ERROR).
        """
        super().__init__(message, details={"error_code": error_code})
        self.error_code = error_code


class ServerRejection(StorefrontError):
    """Raised when the backend answered but refused the request.

    Covers non-2xx status codes and 2xx bodies carrying ``success: false``.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str = "SERVER_REJECTION",
    ) -> None:
        """Initialize server rejection.

        Args:
            message: Message returned by the server, or a fallback.
            status_code: HTTP status code of the response.
            error_code: Error code returned by the server.
        """
        super().__init__(
            message,
            details={"status_code": status_code, "error_code": error_code},
        )
        self.status_code = status_code
        self.error_code = error_code


# ============================================================================
# Durable Storage Errors
# ============================================================================


class ParseFailure(StorefrontError):
    """Raised when a durable storage payload cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize parse failure.

        Args:
            key: Storage key that held the payload.
            reason: Why decoding failed.
        """
        super().__init__(
            f"Cannot parse stored value under '{key}': {reason}",
            details={"key": key, "reason": reason},
        )
        self.key = key


# ============================================================================
# Catalog Errors
# ============================================================================


class StaleResponseError(StorefrontError):
    """Raised when a response belongs to a query superseded by a newer one."""

    def __init__(self, tag: int, latest_tag: int) -> None:
        """Initialize stale response error.

        Args:
            tag: Tag of the query the response belongs to.
            latest_tag: Tag of the most recently issued query.
        """
        super().__init__(
            f"Response for query #{tag} is stale (latest is #{latest_tag})",
            details={"tag": tag, "latest_tag": latest_tag},
        )
        self.tag = tag
        self.latest_tag = latest_tag


class UnknownPriceRangeError(StorefrontError):
    """Raised when a price token does not match any known price bucket."""

    def __init__(self, token: Any) -> None:
        """Initialize unknown price range error.

        Args:
            token: The value that could not be resolved.
        """
        super().__init__(
            f"Unknown price range: {token!r}",
            details={"token": repr(token)},
        )


class InvalidStateTransitionError(StorefrontError):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of state holder (e.g., "Catalog").
            current_state: Current state.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type} "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )
