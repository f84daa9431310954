"""Catalog browsing state machine.

Defines the lifecycle of the visible product list and the valid
transitions between loading states.
"""

from enum import Enum

from storefront.exceptions import InvalidStateTransitionError


class CatalogStatus(str, Enum):
    """Catalog browsing states.

    State diagram:
        IDLE
          │
          │ issue query
          ▼
        LOADING ◄──────────────┐  (a newer query supersedes the one in flight)
          │       │            │
          │       └────────────┘
          │
          ├── latest response ok ──────► READY ───── issue query ──► LOADING
          │
          └── latest response failed ──► FAILED ──── issue query ──► LOADING
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"

    def can_transition_to(self, target: "CatalogStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _CATALOG_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["CatalogStatus"]:
        """Get list of valid target states."""
        return list(_CATALOG_TRANSITIONS.get(self, set()))

    def is_settled(self) -> bool:
        """Check if no committed query is outstanding."""
        return self in {CatalogStatus.READY, CatalogStatus.FAILED}


# Catalog state transitions (defined outside enum to avoid Enum restrictions)
_CATALOG_TRANSITIONS: dict[CatalogStatus, set[CatalogStatus]] = {
    CatalogStatus.IDLE: {CatalogStatus.LOADING},
    CatalogStatus.LOADING: {CatalogStatus.LOADING, CatalogStatus.READY, CatalogStatus.FAILED},
    CatalogStatus.READY: {CatalogStatus.LOADING},
    CatalogStatus.FAILED: {CatalogStatus.LOADING},
}


def validate_catalog_transition(
    current_status: CatalogStatus,
    target_status: CatalogStatus,
) -> None:
    """Validate and raise if catalog state transition is invalid.

    Args:
        current_status: Current catalog status.
        target_status: Target catalog status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="Catalog",
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )
