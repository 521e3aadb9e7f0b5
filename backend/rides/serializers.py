from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import Ride

from accounts.serializers import UserBasicSerializer
from common.serializers import KeyAliasMixin
from vehicles.serializers import VehicleBasicSerializer

User = get_user_model()


class DriverSummarySerializer(serializers.ModelSerializer):
    """Driver contact details plus their vehicles, shown to passengers."""
    vehicles = VehicleBasicSerializer(many=True, read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'phone', 'vehicles']


class RideSerializer(serializers.ModelSerializer):
    """Serializer for Rides"""
    driver = DriverSummarySerializer(read_only=True)

    class Meta:
        model = Ride
        fields = ['id', 'driver', 'origin', 'destination', 'date', 'price',
                  'seats_available', 'status', 'created_at']
        read_only_fields = fields


class RideSummarySerializer(serializers.ModelSerializer):
    """Route and date only, embedded in reviews and booking updates."""

    class Meta:
        model = Ride
        fields = ['id', 'origin', 'destination', 'date']


class BookingBriefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    status = serializers.CharField()


class PublicRideSerializer(RideSerializer):
    """Open ride listing: adds the id/status of each booking."""
    bookings = BookingBriefSerializer(many=True, read_only=True)

    class Meta(RideSerializer.Meta):
        fields = RideSerializer.Meta.fields + ['bookings']
        read_only_fields = fields


class RideCreateSerializer(KeyAliasMixin, serializers.Serializer):
    """Serializer for publishing a ride"""
    key_aliases = {"seatsAvailable": "seats_available"}

    origin = serializers.CharField(max_length=255)
    destination = serializers.CharField(max_length=255)
    date = serializers.DateField()
    time = serializers.TimeField()
    price = serializers.FloatField(min_value=0)
    seats_available = serializers.IntegerField(min_value=0)
