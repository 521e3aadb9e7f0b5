from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsDriver
from bookings.serializers import DriverRideSerializer
from common.serializers import StatusSerializer
from .serializers import (
    RideSerializer,
    PublicRideSerializer,
    RideCreateSerializer,
)

# Import from services layer
from services.ride_management import (
    create_ride as create_ride_service,
    update_ride_status as update_ride_status_service,
    delete_ride as delete_ride_service,
    search_rides as search_rides_service,
    list_available_rides,
    list_driver_rides,
)


# ==================== Public Ride APIs ====================

@api_view(['GET'])
def get_all_rides(request):
    """All scheduled rides that still have free seats, soonest first."""
    rides = list_available_rides()
    return Response({'rides': PublicRideSerializer(rides, many=True).data})


@api_view(['GET'])
def search_rides(request):
    """
    Search open rides by origin/destination substring.

    GET /api/ride/search/?source=<origin>&destination=<destination>
    """
    rides = search_rides_service(
        request.query_params.get('source'),
        request.query_params.get('destination'),
    )
    data = RideSerializer(rides, many=True).data

    if not data:
        return Response({'message': 'No rides found'}, status=status.HTTP_404_NOT_FOUND)

    return Response({'rides': data})


# ==================== Driver Ride APIs ====================

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDriver])
def create_ride(request):
    """Publish a new ride (drivers only)"""
    serializer = RideCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    ride = create_ride_service(request.user, **serializer.validated_data)

    return Response({
        'message': 'Ride created successfully!',
        'ride': RideSerializer(ride).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_my_rides(request):
    """Rides published by the logged-in driver, with their bookings"""
    rides = list_driver_rides(request.user)
    return Response({'rides': DriverRideSerializer(rides, many=True).data})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_ride_status(request, ride_id):
    """
    Move a ride to another status.

    Completing a ride completes every CONFIRMED booking on it.
    """
    serializer = StatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    ride = update_ride_status_service(request.user, ride_id, serializer.validated_data['status'])

    return Response({
        'message': 'Ride status updated',
        'ride': RideSerializer(ride).data,
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_ride(request, ride_id):
    """Delete a ride that has no bookings"""
    delete_ride_service(request.user, ride_id)
    return Response({'message': 'Ride deleted successfully'})
