from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL


class Vehicle(models.Model):
    """A car registered by a driver; shown alongside the driver's rides."""

    driver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='vehicles')

    make = models.CharField(max_length=50)
    model = models.CharField(max_length=50)
    year = models.PositiveIntegerField()
    color = models.CharField(max_length=30)
    license_plate = models.CharField(max_length=20, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'vehicles'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.make} {self.model} ({self.license_plate})"
