"""Tells what to show in the Django admin interface for bookings app"""

from django.contrib import admin
from .models import Booking, Review


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Booking admin"""
    list_display = ['id', 'ride', 'passenger', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['passenger__email', 'ride__origin', 'ride__destination']
    readonly_fields = ['created_at']


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("booking", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("booking__id", "booking__passenger__email")
    readonly_fields = ("created_at",)
