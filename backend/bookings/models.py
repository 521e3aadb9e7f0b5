from django.db import models
from django.db.models import Q
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from rides.models import Ride


class Booking(models.Model):
    """A passenger's reserved seat on a ride."""

    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    # Rides with bookings cannot be deleted
    ride = models.ForeignKey(
        Ride,
        on_delete=models.PROTECT,
        related_name='bookings'
    )

    passenger = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bookings'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['passenger', 'ride'],
                condition=~Q(status='CANCELLED'),
                name='unique_active_booking_per_passenger'
            )
        ]

    def __str__(self):
        return f"Booking #{self.id} - Ride {self.ride_id} - {self.passenger} - {self.status}"


class Review(models.Model):
    """A passenger's 1-5 star rating of a completed booking. Immutable once written."""

    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name='review'
    )

    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reviews'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(rating__gte=1) & Q(rating__lte=5),
                name='review_rating_between_1_and_5'
            )
        ]

    def __str__(self):
        return f"Review #{self.id} - Booking {self.booking_id} - {self.rating}*"
