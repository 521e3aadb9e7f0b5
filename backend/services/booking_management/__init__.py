"""
Booking management service - seat inventory and booking lifecycle.

This module handles:
    - Reserving and releasing seats
    - Creating and cancelling bookings
    - Driver-side booking status updates
    - Completing confirmed bookings when a ride completes
"""

from .inventory import (
    lock_ride,
    reserve_seat,
    release_seat,
)
from .booking_lifecycle import (
    create_booking,
    cancel_booking,
    update_booking_status,
    complete_confirmed_bookings,
    list_passenger_bookings,
)

__all__ = [
    "lock_ride",
    "reserve_seat",
    "release_seat",
    "create_booking",
    "cancel_booking",
    "update_booking_status",
    "complete_confirmed_bookings",
    "list_passenger_bookings",
]
