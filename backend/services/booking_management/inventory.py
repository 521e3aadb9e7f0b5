"""
Inventory ledger: seat-count arithmetic for rides.

All functions must run inside a ``transaction.atomic`` block opened by the
caller, so the seat change commits or rolls back together with the booking
row it accompanies.
"""

import logging

from django.db.models import F

from rides.models import Ride
from ..exceptions import RideNotFoundError, SoldOutError

logger = logging.getLogger(__name__)


def lock_ride(ride_id: int) -> Ride:
    """
    Load a ride with a row lock (SELECT ... FOR UPDATE).

    Concurrent reservations, cancellations, status changes and deletions of
    the same ride queue up behind this lock until the holder commits.

    Raises:
        RideNotFoundError: If the ride does not exist
    """
    try:
        return Ride.objects.select_for_update().get(id=ride_id)
    except Ride.DoesNotExist:
        raise RideNotFoundError()


def reserve_seat(ride_id: int) -> int:
    """
    Take one seat from a ride.

    The decrement is a conditional UPDATE guarded by ``seats_available > 0``,
    so two transactions that both saw one free seat cannot both succeed.

    Returns:
        Seats left after the reservation

    Raises:
        RideNotFoundError: If the ride does not exist
        SoldOutError: If no seat is left
    """
    ride = lock_ride(ride_id)
    if ride.seats_available <= 0:
        raise SoldOutError()

    updated = Ride.objects.filter(
        id=ride_id,
        seats_available__gt=0,
    ).update(seats_available=F('seats_available') - 1)
    if not updated:
        raise SoldOutError()

    remaining = Ride.objects.values_list('seats_available', flat=True).get(id=ride_id)
    logger.info("Reserved seat on ride %s (%s left)", ride_id, remaining)
    return remaining


def release_seat(ride_id: int) -> int:
    """
    Give one seat back to a ride. No capacity ceiling is applied.

    Returns:
        Seats left after the release
    """
    updated = Ride.objects.filter(id=ride_id).update(seats_available=F('seats_available') + 1)
    if not updated:
        raise RideNotFoundError()

    remaining = Ride.objects.values_list('seats_available', flat=True).get(id=ride_id)
    logger.info("Released seat on ride %s (%s left)", ride_id, remaining)
    return remaining
