"""
Booking lifecycle operations.

PENDING -> CONFIRMED -> COMPLETED, with passengers able to cancel anything
not yet completed. Seat bookkeeping goes through the inventory ledger in the
same transaction as the booking write.

Lock order is always ride row first, then booking rows, matching the ride
status cascade so the two never deadlock.
"""

import logging

from django.db import IntegrityError, transaction

from bookings.models import Booking
from rides.models import Ride
from ..exceptions import (
    BookingNotFoundError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    SoldOutError,
    ValidationFailedError,
)
from ..transitions import BOOKING_STATUSES, BOOKING_TRANSITIONS, check_transition, validate_status
from .inventory import lock_ride, release_seat, reserve_seat

logger = logging.getLogger(__name__)


def _booking_with_details(booking_id: int) -> Booking:
    return (
        Booking.objects
        .select_related('ride__driver', 'passenger')
        .prefetch_related('ride__driver__vehicles')
        .get(id=booking_id)
    )


def _parse_ride_id(ride_id) -> int:
    if ride_id in (None, ""):
        raise ValidationFailedError("Ride ID is required")
    try:
        return int(ride_id)
    except (TypeError, ValueError):
        raise ValidationFailedError("Ride ID must be an integer")


# ===================== Passenger Operations =====================

@transaction.atomic
def create_booking(passenger, ride_id) -> Booking:
    """
    Reserve one seat on a ride for a passenger.

    Args:
        passenger: User model instance making the reservation
        ride_id: ID of the ride to book

    Returns:
        The new PENDING booking with ride, driver and vehicles loaded

    Raises:
        ValidationFailedError: If ride_id is missing or not a number
        RideNotFoundError: If the ride does not exist
        InvalidStateError: If the ride is no longer SCHEDULED
        SoldOutError: If the ride has no seats left
        ConflictError: If the passenger drives this ride or already holds a booking on it
    """
    ride_id = _parse_ride_id(ride_id)
    ride = lock_ride(ride_id)

    if ride.status != Ride.SCHEDULED:
        raise InvalidStateError(f"Ride is {ride.status} and can no longer be booked")

    if ride.seats_available <= 0:
        raise SoldOutError()

    if ride.driver_id == passenger.id:
        raise ConflictError("You cannot book your own ride")

    already_booked = (
        Booking.objects
        .filter(passenger=passenger, ride=ride)
        .exclude(status=Booking.CANCELLED)
        .exists()
    )
    if already_booked:
        raise ConflictError("You already booked this ride")

    reserve_seat(ride.id)

    try:
        with transaction.atomic():
            booking = Booking.objects.create(ride=ride, passenger=passenger)
    except IntegrityError:
        raise ConflictError("You already booked this ride")

    logger.info("Passenger %s booked ride %s (booking %s)", passenger.id, ride.id, booking.id)
    return _booking_with_details(booking.id)


@transaction.atomic
def cancel_booking(passenger, booking_id: int) -> None:
    """
    Cancel a booking and hand its seat back to the ride.

    The booking row is removed (not marked CANCELLED) together with the seat
    release.

    Raises:
        BookingNotFoundError: If the booking does not exist
        ForbiddenError: If the caller is not the booking's passenger
        InvalidStateError: If the booking is already COMPLETED
    """
    ride_id = (
        Booking.objects
        .filter(id=booking_id)
        .values_list('ride_id', flat=True)
        .first()
    )
    if ride_id is None:
        raise BookingNotFoundError()

    lock_ride(ride_id)
    try:
        booking = Booking.objects.select_for_update().get(id=booking_id)
    except Booking.DoesNotExist:
        raise BookingNotFoundError()

    if booking.passenger_id != passenger.id:
        raise ForbiddenError("You can only cancel your own bookings")

    if booking.status == Booking.COMPLETED:
        raise InvalidStateError("Cannot cancel completed bookings")

    booking.delete()
    release_seat(ride_id)

    logger.info("Passenger %s cancelled booking %s on ride %s", passenger.id, booking_id, ride_id)


def list_passenger_bookings(passenger):
    """Passenger's bookings, newest first, with ride, driver, vehicles and review."""
    return (
        Booking.objects
        .filter(passenger=passenger)
        .select_related('ride__driver', 'review')
        .prefetch_related('ride__driver__vehicles')
        .order_by('-created_at')
    )


# ===================== Driver Operations =====================

@transaction.atomic
def update_booking_status(driver, booking_id: int, new_status) -> Booking:
    """
    Overwrite a booking's status on behalf of the ride's driver.

    Any enum value is accepted from any state unless status transition
    enforcement is switched on. Seats are not touched here; only an explicit
    passenger cancellation releases a seat.

    Raises:
        ValidationFailedError: If new_status is not a booking status
        BookingNotFoundError: If the booking does not exist
        ForbiddenError: If the caller does not drive the booking's ride
        InvalidStateError: If enforcement is on and the move is illegal
        ConflictError: If reviving the booking would give the passenger a second active booking
    """
    validate_status(new_status, BOOKING_STATUSES)

    try:
        booking = (
            Booking.objects
            .select_for_update(of=('self',))
            .select_related('ride')
            .get(id=booking_id)
        )
    except Booking.DoesNotExist:
        raise BookingNotFoundError()

    if booking.ride.driver_id != driver.id:
        raise ForbiddenError("Only the ride driver can update booking status")

    check_transition(BOOKING_TRANSITIONS, booking.status, new_status, "booking")

    previous = booking.status
    booking.status = new_status
    try:
        with transaction.atomic():
            booking.save(update_fields=['status'])
    except IntegrityError:
        raise ConflictError("Passenger already holds an active booking on this ride")

    logger.info(
        "Driver %s moved booking %s from %s to %s", driver.id, booking.id, previous, new_status
    )
    return Booking.objects.select_related('ride', 'passenger').get(id=booking.id)


def complete_confirmed_bookings(ride) -> int:
    """
    Mark every CONFIRMED booking of a ride COMPLETED. PENDING ones stay as they are.

    Called from the ride status update, inside its transaction.

    Returns:
        Number of bookings completed
    """
    completed = (
        Booking.objects
        .filter(ride=ride, status=Booking.CONFIRMED)
        .update(status=Booking.COMPLETED)
    )
    if completed:
        logger.info("Completed %s confirmed booking(s) on ride %s", completed, ride.id)
    return completed
