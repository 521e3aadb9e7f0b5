from rest_framework import serializers
from vehicles.models import Vehicle
from common.serializers import KeyAliasMixin


class VehicleSerializer(serializers.ModelSerializer):
    """
    Full vehicle serializer (owner views)
    """
    class Meta:
        model = Vehicle
        fields = [
            "id",
            "driver",
            "make",
            "model",
            "year",
            "color",
            "license_plate",
            "created_at",
        ]
        read_only_fields = ["id", "driver", "created_at"]


class VehicleBasicSerializer(serializers.ModelSerializer):
    """
    Lite version of vehicle info for ride details shown to passengers.
    """
    class Meta:
        model = Vehicle
        fields = [
            "id",
            "make",
            "model",
            "year",
            "color",
            "license_plate",
        ]


class VehicleWriteSerializer(KeyAliasMixin, serializers.Serializer):
    """
    Validates vehicle create / update payloads.
    """
    key_aliases = {"licensePlate": "license_plate"}

    make = serializers.CharField(max_length=50)
    model = serializers.CharField(max_length=50)
    year = serializers.IntegerField(min_value=1900, max_value=2100)
    color = serializers.CharField(max_length=30)
    license_plate = serializers.CharField(max_length=20)
