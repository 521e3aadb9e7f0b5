"""
Reviews of completed bookings and the driver reputation built from them.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from django.db import IntegrityError, transaction

from bookings.models import Booking, Review
from ..exceptions import (
    BookingNotFoundError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def parse_rating(value) -> int:
    """Accept an integer (or integer string) between 1 and 5."""
    if isinstance(value, bool):
        raise ValidationFailedError("Rating must be between 1 and 5")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailedError("Rating must be between 1 and 5")
    return value


@transaction.atomic
def add_review(passenger, booking_id: int, rating, comment: Optional[str] = None) -> Review:
    """
    Record the passenger's review of a completed booking.

    Raises:
        ValidationFailedError: If rating is not an integer in [1, 5]
        BookingNotFoundError: If the booking does not exist
        ForbiddenError: If the caller is not the booking's passenger
        InvalidStateError: If the booking is not COMPLETED
        ConflictError: If the booking already has a review
    """
    rating = parse_rating(rating)

    try:
        booking = Booking.objects.select_for_update().get(id=booking_id)
    except Booking.DoesNotExist:
        raise BookingNotFoundError()

    if booking.passenger_id != passenger.id:
        raise ForbiddenError("You can only review your own bookings")

    if booking.status != Booking.COMPLETED:
        raise InvalidStateError("Can only review completed rides")

    if Review.objects.filter(booking=booking).exists():
        raise ConflictError("You already reviewed this ride")

    try:
        with transaction.atomic():
            review = Review.objects.create(
                booking=booking,
                rating=rating,
                comment=comment or None,
            )
    except IntegrityError:
        raise ConflictError("You already reviewed this ride")

    logger.info("Passenger %s rated booking %s with %s", passenger.id, booking.id, rating)
    return (
        Review.objects
        .select_related('booking__ride__driver', 'booking__passenger')
        .get(id=review.id)
    )


def average_rating(ratings) -> float:
    """Arithmetic mean rounded half-up to one decimal; 0 when there are no ratings."""
    ratings = list(ratings)
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def rating_distribution(ratings) -> Dict[int, int]:
    distribution = {star: 0 for star in range(MAX_RATING, MIN_RATING - 1, -1)}
    for rating in ratings:
        distribution[rating] += 1
    return distribution


def list_driver_reviews(driver_id: int) -> Dict[str, Any]:
    """
    All reviews left on a driver's rides (newest first) plus the aggregate
    reputation: count, mean and per-star histogram, computed on every call.
    """
    reviews = list(
        Review.objects
        .filter(booking__ride__driver_id=driver_id)
        .select_related('booking__passenger', 'booking__ride')
        .order_by('-created_at', '-id')
    )
    ratings = [review.rating for review in reviews]

    return {
        "driver_id": driver_id,
        "total_reviews": len(reviews),
        "average_rating": average_rating(ratings),
        "rating_distribution": rating_distribution(ratings),
        "reviews": reviews,
    }
