"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP layer.

Modules:
    - booking_management: Seat inventory and booking lifecycle
    - reviews: Review gate and driver reputation
    - ride_management: Ride publishing, search and status lifecycle
"""

# Expose commonly used functions at package level
from .booking_management import (
    lock_ride,
    reserve_seat,
    release_seat,
    create_booking,
    cancel_booking,
    update_booking_status,
    complete_confirmed_bookings,
    list_passenger_bookings,
)
from .reviews import (
    add_review,
    list_driver_reviews,
)
from .ride_management import (
    create_ride,
    update_ride_status,
    delete_ride,
    search_rides,
    list_available_rides,
    list_driver_rides,
)
from .exceptions import (
    MarketplaceError,
    ValidationFailedError,
    ForbiddenError,
    NotFoundError,
    RideNotFoundError,
    BookingNotFoundError,
    VehicleNotFoundError,
    ConflictError,
    SoldOutError,
    InvalidStateError,
)

__all__ = [
    # Inventory
    "lock_ride",
    "reserve_seat",
    "release_seat",
    # Bookings
    "create_booking",
    "cancel_booking",
    "update_booking_status",
    "complete_confirmed_bookings",
    "list_passenger_bookings",
    # Reviews
    "add_review",
    "list_driver_reviews",
    # Rides
    "create_ride",
    "update_ride_status",
    "delete_ride",
    "search_rides",
    "list_available_rides",
    "list_driver_rides",
    # Exceptions
    "MarketplaceError",
    "ValidationFailedError",
    "ForbiddenError",
    "NotFoundError",
    "RideNotFoundError",
    "BookingNotFoundError",
    "VehicleNotFoundError",
    "ConflictError",
    "SoldOutError",
    "InvalidStateError",
]
