from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """Marketplace user. Drivers publish rides, everyone can book them."""

    # Login identifier
    email = models.EmailField(unique=True)

    # Profile
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=20, blank=True)
    is_driver = models.BooleanField(default=False)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'

    def __str__(self):
        role = "Driver" if self.is_driver else "Passenger"
        return f"{self.name or self.email} ({role})"
