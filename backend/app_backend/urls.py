from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint

    # Authentication endpoints (register, login, refresh)
    path('api/auth/', include('accounts.urls')),

    # Profile of the logged-in user
    path('api/user/', include('accounts.profile_urls')),

    # Rides (publish, search, status, delete)
    path('api/ride/', include('rides.urls')),

    # Bookings and reviews
    path('api/booking/', include('bookings.urls')),

    # Driver vehicles
    path('api/vehicle/', include('vehicles.urls')),
]
