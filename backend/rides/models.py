from django.db import models
from django.conf import settings


class Ride(models.Model):
    """A scheduled trip published by a driver, with a live seat counter."""

    SCHEDULED = 'SCHEDULED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rides'
    )

    # Route & schedule
    origin = models.CharField(max_length=255)
    destination = models.CharField(max_length=255)
    date = models.DateTimeField()

    price = models.FloatField()

    # Seat inventory: remaining unbooked seats, only mutated by the inventory ledger
    seats_available = models.PositiveIntegerField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=SCHEDULED)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'rides'
        ordering = ['date']
        indexes = [
            models.Index(fields=['status', 'date'], name='rides_status_date_idx'),
        ]

    def __str__(self):
        return f"Ride #{self.id} - {self.origin} -> {self.destination} - {self.status}"
