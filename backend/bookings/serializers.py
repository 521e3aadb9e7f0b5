from rest_framework import serializers

from accounts.serializers import UserBasicSerializer
from common.serializers import KeyAliasMixin
from rides.models import Ride
from rides.serializers import RideSerializer, RideSummarySerializer
from .models import Booking, Review


class ReviewSerializer(serializers.ModelSerializer):
    """Bare review, embedded in booking payloads"""

    class Meta:
        model = Review
        fields = ['id', 'rating', 'comment', 'created_at']
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """
    Passenger view of a booking: the ride with its driver and vehicles,
    plus the review once one has been written.
    """
    ride = RideSerializer(read_only=True)
    review = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = ['id', 'ride', 'status', 'created_at', 'review']
        read_only_fields = fields

    def get_review(self, obj):
        try:
            return ReviewSerializer(obj.review).data
        except Review.DoesNotExist:
            return None


class BookingStatusResultSerializer(serializers.ModelSerializer):
    """Driver view after a status change"""
    passenger = UserBasicSerializer(read_only=True)
    ride = RideSummarySerializer(read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'status', 'created_at', 'passenger', 'ride']
        read_only_fields = fields


class RideBookingSerializer(BookingStatusResultSerializer):
    """Booking row inside a driver's ride listing"""
    review = serializers.SerializerMethodField()

    class Meta(BookingStatusResultSerializer.Meta):
        fields = ['id', 'status', 'created_at', 'passenger', 'review']
        read_only_fields = fields

    def get_review(self, obj):
        try:
            return ReviewSerializer(obj.review).data
        except Review.DoesNotExist:
            return None


class DriverRideSerializer(serializers.ModelSerializer):
    """A driver's own ride with everyone who booked it"""
    bookings = RideBookingSerializer(many=True, read_only=True)

    class Meta:
        model = Ride
        fields = ['id', 'origin', 'destination', 'date', 'price',
                  'seats_available', 'status', 'created_at', 'bookings']
        read_only_fields = fields


class DriverReviewSerializer(serializers.ModelSerializer):
    """Review as listed on a driver's reputation page"""
    passenger = UserBasicSerializer(source='booking.passenger', read_only=True)
    ride = RideSummarySerializer(source='booking.ride', read_only=True)
    booking_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'booking_id', 'rating', 'comment', 'created_at', 'passenger', 'ride']
        read_only_fields = fields


class BookingCreateSerializer(KeyAliasMixin, serializers.Serializer):
    """Serializer for reserving a seat"""
    key_aliases = {"rideId": "ride_id"}

    ride_id = serializers.IntegerField(
        error_messages={'required': 'Ride ID is required', 'null': 'Ride ID is required'}
    )


class ReviewCreateSerializer(serializers.Serializer):
    """Serializer for reviewing a completed booking"""
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            'min_value': 'Rating must be between 1 and 5',
            'max_value': 'Rating must be between 1 and 5',
        }
    )
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReviewResultSerializer(DriverReviewSerializer):
    """Freshly created review, with the driver it was left for"""
    driver = UserBasicSerializer(source='booking.ride.driver', read_only=True)

    class Meta(DriverReviewSerializer.Meta):
        fields = DriverReviewSerializer.Meta.fields + ['driver']
        read_only_fields = fields
