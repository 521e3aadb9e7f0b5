"""
Core ride lifecycle operations.

This module contains the business logic for publishing, searching,
advancing and deleting rides, extracted from the views layer for better
testability and reuse.
"""

import logging
from datetime import date as date_cls, datetime, time as time_cls
from typing import Optional

from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from bookings.models import Booking
from rides.models import Ride
from ..booking_management.booking_lifecycle import complete_confirmed_bookings
from ..booking_management.inventory import lock_ride
from ..exceptions import (
    ConflictError,
    ForbiddenError,
    ValidationFailedError,
)
from ..transitions import RIDE_STATUSES, RIDE_TRANSITIONS, check_transition, validate_status

logger = logging.getLogger(__name__)


def combine_schedule(day: date_cls, at: time_cls) -> datetime:
    """Join a calendar date and a wall-clock time into an aware datetime."""
    scheduled = datetime.combine(day, at.replace(second=0, microsecond=0))
    if timezone.is_naive(scheduled):
        scheduled = timezone.make_aware(scheduled, timezone.get_current_timezone())
    return scheduled


# ===================== Driver Operations =====================

def create_ride(
    driver,
    origin: str,
    destination: str,
    date: date_cls,
    time: time_cls,
    price: float,
    seats_available: int,
) -> Ride:
    """
    Publish a new SCHEDULED ride.

    Args:
        driver: User model instance; must have is_driver set
        origin: Departure place
        destination: Arrival place
        date: Departure day
        time: Departure time of day
        price: Price per seat
        seats_available: Seats offered

    Returns:
        The created ride

    Raises:
        ForbiddenError: If the caller is not a driver
    """
    if not getattr(driver, "is_driver", False):
        raise ForbiddenError("Only drivers can create rides.")

    ride = Ride.objects.create(
        driver=driver,
        origin=origin,
        destination=destination,
        date=combine_schedule(date, time),
        price=float(price),
        seats_available=int(seats_available),
        status=Ride.SCHEDULED,
    )
    logger.info("Driver %s created ride %s with %s seat(s)", driver.id, ride.id, ride.seats_available)
    return ride


@transaction.atomic
def update_ride_status(driver, ride_id: int, new_status) -> Ride:
    """
    Set a ride's status. Completing a ride completes its CONFIRMED bookings
    in the same transaction.

    Raises:
        ValidationFailedError: If new_status is not a ride status
        RideNotFoundError: If the ride does not exist
        ForbiddenError: If the caller does not own the ride
        InvalidStateError: If enforcement is on and the move is illegal
    """
    validate_status(new_status, RIDE_STATUSES)
    ride = lock_ride(ride_id)

    if ride.driver_id != driver.id:
        raise ForbiddenError("You can only update your own rides")

    check_transition(RIDE_TRANSITIONS, ride.status, new_status, "ride")

    previous = ride.status
    ride.status = new_status
    ride.save(update_fields=['status'])

    if new_status == Ride.COMPLETED:
        complete_confirmed_bookings(ride)

    logger.info("Driver %s moved ride %s from %s to %s", driver.id, ride.id, previous, new_status)
    return ride


@transaction.atomic
def delete_ride(driver, ride_id: int) -> None:
    """
    Delete a ride that has never been booked.

    Raises:
        RideNotFoundError: If the ride does not exist
        ForbiddenError: If the caller does not own the ride
        ConflictError: If any booking (in any status) references the ride
    """
    ride = lock_ride(ride_id)

    if ride.driver_id != driver.id:
        raise ForbiddenError("You can only delete your own rides")

    if ride.bookings.exists():
        raise ConflictError("Cannot delete ride with existing bookings. Cancel the ride instead.")

    ride.delete()
    logger.info("Driver %s deleted ride %s", driver.id, ride_id)


def list_driver_rides(driver):
    """Driver's own rides (date ascending) with bookings, passengers and reviews."""
    bookings = Booking.objects.select_related('passenger', 'review').order_by('-created_at')
    return (
        Ride.objects
        .filter(driver=driver)
        .prefetch_related(Prefetch('bookings', queryset=bookings))
        .order_by('date')
    )


# ===================== Passenger Queries =====================

def _open_rides():
    return (
        Ride.objects
        .filter(status=Ride.SCHEDULED, seats_available__gt=0)
        .select_related('driver')
        .prefetch_related('driver__vehicles')
        .order_by('date')
    )


def list_available_rides():
    """All SCHEDULED rides that still have seats, soonest first."""
    return _open_rides().prefetch_related('bookings')


def search_rides(source: Optional[str], destination: Optional[str]):
    """
    Case-insensitive substring search over open rides.

    Returns an empty queryset when nothing matches; the caller decides how
    to present that.

    Raises:
        ValidationFailedError: If source or destination is missing
    """
    source = (source or "").strip()
    destination = (destination or "").strip()
    if not source or not destination:
        raise ValidationFailedError("Source and destination are required")

    return _open_rides().filter(
        origin__icontains=source,
        destination__icontains=destination,
    )
