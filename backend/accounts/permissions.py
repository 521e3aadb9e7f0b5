# accounts/permissions.py
from rest_framework.permissions import BasePermission


class IsDriver(BasePermission):
    """
    Allows access only to users registered as drivers (is_driver == True).
    Keeps role check logic centralized.
    """
    message = "Only drivers can perform this action."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_driver", False))
