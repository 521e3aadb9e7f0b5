"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Publishing rides
    - Searching and listing rides
    - Advancing ride status (with the booking completion cascade)
    - Deleting unbooked rides
"""

from .ride_lifecycle import (
    create_ride,
    update_ride_status,
    delete_ride,
    search_rides,
    list_available_rides,
    list_driver_rides,
    combine_schedule,
)

__all__ = [
    # Lifecycle operations
    "create_ride",
    "update_ride_status",
    "delete_ride",
    # Queries
    "search_rides",
    "list_available_rides",
    "list_driver_rides",
    "combine_schedule",
]
