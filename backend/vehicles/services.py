import logging

from django.db import IntegrityError, transaction

from vehicles.models import Vehicle
from services.exceptions import (
    ConflictError,
    ForbiddenError,
    VehicleNotFoundError,
)

logger = logging.getLogger(__name__)

PLATE_TAKEN = "License plate already registered"


def _get_owned_vehicle(driver, vehicle_id: int, action: str) -> Vehicle:
    try:
        vehicle = Vehicle.objects.get(id=vehicle_id)
    except Vehicle.DoesNotExist:
        raise VehicleNotFoundError()

    if vehicle.driver_id != driver.id:
        raise ForbiddenError(f"You can only {action} your own vehicles")
    return vehicle


def add_vehicle(driver, make, model, year, color, license_plate) -> Vehicle:
    """Register a vehicle for a driver. Plates are globally unique."""
    if not driver.is_driver:
        raise ForbiddenError("Only drivers can add vehicles")

    if Vehicle.objects.filter(license_plate=license_plate).exists():
        raise ConflictError(PLATE_TAKEN)

    try:
        with transaction.atomic():
            vehicle = Vehicle.objects.create(
                driver=driver,
                make=make,
                model=model,
                year=year,
                color=color,
                license_plate=license_plate,
            )
    except IntegrityError:
        raise ConflictError(PLATE_TAKEN)

    logger.info("Driver %s added vehicle %s", driver.id, vehicle.id)
    return vehicle


def list_driver_vehicles(driver):
    return Vehicle.objects.filter(driver=driver).order_by("-created_at")


def update_vehicle(driver, vehicle_id: int, **changes) -> Vehicle:
    """Apply the non-empty fields of `changes` to one of the driver's vehicles."""
    vehicle = _get_owned_vehicle(driver, vehicle_id, "update")

    changes = {field: value for field, value in changes.items() if value not in (None, "")}
    plate = changes.get("license_plate")
    if plate and plate != vehicle.license_plate:
        if Vehicle.objects.filter(license_plate=plate).exclude(id=vehicle.id).exists():
            raise ConflictError(PLATE_TAKEN)

    for field, value in changes.items():
        setattr(vehicle, field, value)

    try:
        with transaction.atomic():
            vehicle.save(update_fields=list(changes) or None)
    except IntegrityError:
        raise ConflictError(PLATE_TAKEN)
    return vehicle


def delete_vehicle(driver, vehicle_id: int) -> None:
    vehicle = _get_owned_vehicle(driver, vehicle_id, "delete")
    vehicle.delete()
    logger.info("Driver %s deleted vehicle %s", driver.id, vehicle_id)
