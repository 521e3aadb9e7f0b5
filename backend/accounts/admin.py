from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin panel for custom User model"""

    list_display = [
        "email",
        "name",
        "phone",
        "is_driver",
        "is_active",
        "is_staff",
    ]

    list_filter = [
        "is_driver",
        "is_active",
        "is_staff",
        "date_joined",
    ]

    search_fields = [
        "email",
        "name",
        "phone",
    ]

    ordering = ("email",)

    # Extend default Django UserAdmin fieldsets
    fieldsets = BaseUserAdmin.fieldsets + (
        (
            "Marketplace Info",
            {
                "fields": (
                    "name",
                    "phone",
                    "is_driver",
                )
            },
        ),
    )

    # For create user page in admin
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        (
            "Marketplace Info",
            {
                "fields": (
                    "email",
                    "name",
                    "phone",
                    "is_driver",
                )
            },
        ),
    )
