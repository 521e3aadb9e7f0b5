# bookings/views.py

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated

from common.serializers import StatusSerializer
from services.booking_management import (
    create_booking,
    cancel_booking,
    update_booking_status,
    list_passenger_bookings,
)
from services.reviews import add_review, list_driver_reviews
from .serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    BookingStatusResultSerializer,
    DriverReviewSerializer,
    ReviewCreateSerializer,
    ReviewResultSerializer,
)


class BookRideView(APIView):
    """
    POST: Passenger reserves one seat on a ride.

    Body: {"rideId": <int>}  (or "ride_id")
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = create_booking(request.user, serializer.validated_data["ride_id"])

        return Response({
            "message": "Ride booked successfully",
            "booking": BookingSerializer(booking).data,
        }, status=status.HTTP_201_CREATED)


class MyBookingsView(APIView):
    """
    GET: Passenger's bookings, newest first.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        bookings = list_passenger_bookings(request.user)
        return Response({
            "message": "Your bookings fetched",
            "bookings": BookingSerializer(bookings, many=True).data,
        })


class CancelBookingView(APIView):
    """
    DELETE: Passenger cancels a booking; the seat goes back to the ride.
    """
    permission_classes = [IsAuthenticated]

    def delete(self, request, booking_id: int):
        cancel_booking(request.user, booking_id)
        return Response({"message": "Booking cancelled successfully"})


class BookingStatusView(APIView):
    """
    PATCH: Ride driver changes a booking's status.

    Body: {"status": "PENDING" | "CONFIRMED" | "COMPLETED" | "CANCELLED"}
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, booking_id: int):
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]

        booking = update_booking_status(request.user, booking_id, new_status)

        return Response({
            "message": f"Booking status updated to {new_status}",
            "booking": BookingStatusResultSerializer(booking).data,
        })


class AddReviewView(APIView):
    """
    POST: Passenger reviews a completed booking.

    Body: {"rating": 1-5, "comment": "optional"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, booking_id: int):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = add_review(
            request.user,
            booking_id,
            serializer.validated_data["rating"],
            serializer.validated_data.get("comment"),
        )

        return Response({
            "message": "Review added successfully",
            "review": ReviewResultSerializer(review).data,
        }, status=status.HTTP_201_CREATED)


class DriverReviewsView(APIView):
    """
    GET: Public reputation of a driver - reviews, count, average and star histogram.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, driver_id: int):
        result = list_driver_reviews(driver_id)

        return Response({
            "message": "Driver reviews fetched",
            "driver_id": result["driver_id"],
            "total_reviews": result["total_reviews"],
            "average_rating": result["average_rating"],
            "rating_distribution": result["rating_distribution"],
            "reviews": DriverReviewSerializer(result["reviews"], many=True).data,
        })
