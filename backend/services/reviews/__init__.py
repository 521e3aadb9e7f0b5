"""Review gate - one review per completed booking, driver reputation on read."""

from .review_gate import (
    add_review,
    list_driver_reviews,
    average_rating,
    rating_distribution,
)

__all__ = [
    "add_review",
    "list_driver_reviews",
    "average_rating",
    "rating_distribution",
]
