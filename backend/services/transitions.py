"""
Allowed status transitions for rides and bookings.

Status updates historically accepted any enum value from any state. The
tables below describe the forward-only lifecycle; they are only enforced
when ``settings.ENFORCE_STATUS_TRANSITIONS`` is on.
"""

from typing import Dict, FrozenSet

from django.conf import settings

from bookings.models import Booking
from rides.models import Ride
from .exceptions import InvalidStateError, ValidationFailedError


RIDE_STATUSES = frozenset(value for value, _ in Ride.STATUS_CHOICES)
BOOKING_STATUSES = frozenset(value for value, _ in Booking.STATUS_CHOICES)

RIDE_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Ride.SCHEDULED: frozenset({Ride.IN_PROGRESS, Ride.CANCELLED}),
    Ride.IN_PROGRESS: frozenset({Ride.COMPLETED}),
    Ride.COMPLETED: frozenset(),
    Ride.CANCELLED: frozenset(),
}

BOOKING_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Booking.PENDING: frozenset({Booking.CONFIRMED, Booking.CANCELLED}),
    Booking.CONFIRMED: frozenset({Booking.COMPLETED, Booking.CANCELLED}),
    Booking.COMPLETED: frozenset(),
    Booking.CANCELLED: frozenset(),
}


def validate_status(value, allowed: FrozenSet[str]) -> str:
    """Return `value` if it is one of `allowed`, else raise ValidationFailedError."""
    if value not in allowed:
        raise ValidationFailedError(
            f"Invalid status. Must be one of: {', '.join(sorted(allowed))}"
        )
    return value


def enforcement_enabled() -> bool:
    return bool(getattr(settings, "ENFORCE_STATUS_TRANSITIONS", False))


def check_transition(table: Dict[str, FrozenSet[str]], current: str, new: str, label: str) -> None:
    """Raise InvalidStateError for an illegal move, when enforcement is on."""
    if not enforcement_enabled():
        return
    if new not in table.get(current, frozenset()):
        raise InvalidStateError(f"Cannot move {label} from {current} to {new}")
