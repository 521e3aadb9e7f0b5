from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from vehicles.serializers import VehicleSerializer, VehicleWriteSerializer
from vehicles import services


class AddVehicleView(APIView):
    """POST: driver registers a vehicle."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VehicleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        vehicle = services.add_vehicle(request.user, **serializer.validated_data)

        return Response({
            "message": "Vehicle added successfully",
            "vehicle": VehicleSerializer(vehicle).data,
        }, status=status.HTTP_201_CREATED)


class MyVehiclesView(APIView):
    """GET: vehicles of the authenticated driver, newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        vehicles = services.list_driver_vehicles(request.user)
        return Response({
            "message": "Vehicles fetched successfully",
            "vehicles": VehicleSerializer(vehicles, many=True).data,
        })


class VehicleDetailView(APIView):
    """
    PUT    -> Partially update one of my vehicles
    DELETE -> Remove one of my vehicles
    """
    permission_classes = [IsAuthenticated]

    def put(self, request, vehicle_id: int):
        serializer = VehicleWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        vehicle = services.update_vehicle(request.user, vehicle_id, **serializer.validated_data)

        return Response({
            "message": "Vehicle updated successfully",
            "vehicle": VehicleSerializer(vehicle).data,
        })

    def delete(self, request, vehicle_id: int):
        services.delete_vehicle(request.user, vehicle_id)
        return Response({"message": "Vehicle deleted successfully"})
