from django.urls import path
from .views import (
    AddVehicleView,
    MyVehiclesView,
    VehicleDetailView,
)

app_name = 'vehicles'

urlpatterns = [
    path("add/", AddVehicleView.as_view(), name="add-vehicle"),
    path("my-vehicles/", MyVehiclesView.as_view(), name="my-vehicles"),
    path("<int:vehicle_id>/", VehicleDetailView.as_view(), name="vehicle-detail"),
]
