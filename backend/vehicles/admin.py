from django.contrib import admin
from vehicles.models import Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    """Admin panel for managing driver vehicles"""

    list_display = [
        "license_plate",
        "driver",
        "make",
        "model",
        "year",
        "color",
        "created_at",
    ]

    list_filter = [
        "make",
        "year",
    ]

    search_fields = [
        "driver__email",
        "license_plate",
    ]

    readonly_fields = [
        "created_at",
    ]

    ordering = ("license_plate",)
