"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin
from .models import Ride


@admin.register(Ride)
class RideAdmin(admin.ModelAdmin):
    """Ride admin"""
    list_display = ['id', 'driver', 'origin', 'destination', 'date', 'price', 'seats_available', 'status']
    list_filter = ['status', 'date']
    search_fields = ['driver__email', 'origin', 'destination']
    readonly_fields = ['created_at']
    date_hierarchy = 'date'
