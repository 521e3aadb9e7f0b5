# bookings/urls.py

from django.urls import path

from .views import (
    BookRideView,
    MyBookingsView,
    CancelBookingView,
    BookingStatusView,
    AddReviewView,
    DriverReviewsView,
)

app_name = "bookings"

urlpatterns = [
    # BOOKINGS
    path("book/", BookRideView.as_view(), name="book-ride"),
    path("my-bookings/", MyBookingsView.as_view(), name="my-bookings"),
    path("status/<int:booking_id>/", BookingStatusView.as_view(), name="booking-status"),
    path("cancel/<int:booking_id>/", CancelBookingView.as_view(), name="cancel-booking"),

    # REVIEWS
    path("review/<int:booking_id>/", AddReviewView.as_view(), name="add-review"),
    path("driver-reviews/<int:driver_id>/", DriverReviewsView.as_view(), name="driver-reviews"),
]
