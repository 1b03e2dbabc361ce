"""Booking state machine.

Transitions are data-only: ``apply_transition`` returns the column values to
persist and never touches the store.
"""

from datetime import datetime, timezone

from app.core.exceptions import InvalidTransitionError

PAID = "paid"
CHECKED_IN = "checked_in"
PICKED_UP = "picked_up"
CANCELLED = "cancelled"

BOOKING_STATUSES = (PAID, CHECKED_IN, PICKED_UP, CANCELLED)

UNKNOWN_ACTOR = "unknown"
SYSTEM_ACTOR = "system"

BOOKING_TRANSITIONS: dict[str, set[str]] = {
    PAID: {CHECKED_IN, CANCELLED},
    CHECKED_IN: {PICKED_UP, CANCELLED},
    PICKED_UP: set(),
    CANCELLED: set(),
}

# Column that records who performed the transition into each status.
_ACTOR_COLUMNS = {
    CHECKED_IN: "checked_in_by",
    PICKED_UP: "picked_up_by",
    CANCELLED: "cancelled_by",
}

# Column stamped once when the status is entered.
_TIMESTAMP_COLUMNS = {
    CHECKED_IN: "checked_in_at",
    PICKED_UP: "picked_up_at",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_actor(actor: str | None) -> str:
    """Return a usable actor label, falling back to the unknown sentinel."""
    if actor is None or not actor.strip():
        return UNKNOWN_ACTOR
    return actor.strip()


def assert_booking_transition(current: str, target: str) -> None:
    """Raise ``InvalidTransitionError`` unless ``current -> target`` is allowed.

    Same-state requests are rejected as well, so a double submit surfaces as
    an error instead of silently succeeding.
    """
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransitionError(current, target)


def apply_transition(
    current: str,
    target: str,
    actor: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Validate a transition and return the fields it sets.

    Args:
        current: Status currently stored on the booking.
        target: Requested status.
        actor: Free-text identity of whoever performs the change.
        now: Timestamp to stamp; defaults to the current UTC time.

    Returns:
        Mapping of column name to new value, always including ``status`` and
        ``updated_at``.
    """
    assert_booking_transition(current, target)
    now = now or utcnow()

    fields: dict = {"status": target, "updated_at": now}
    if target in _TIMESTAMP_COLUMNS:
        fields[_TIMESTAMP_COLUMNS[target]] = now
    fields[_ACTOR_COLUMNS[target]] = normalize_actor(actor)
    return fields


def requires_archive(target: str) -> bool:
    """Whether entering ``target`` moves the booking to the archive store."""
    return target == PICKED_UP
