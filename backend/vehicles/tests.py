from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from accounts.models import User
from services.exceptions import ConflictError, ForbiddenError, VehicleNotFoundError
from . import services
from .models import Vehicle


def make_user(email, is_driver=True):
	return User.objects.create_user(
		username=email,
		email=email,
		password='pass1234',
		name=email.split('@')[0].title(),
		is_driver=is_driver,
	)


VEHICLE = {
	'make': 'Toyota',
	'model': 'Corolla',
	'year': 2019,
	'color': 'Silver',
	'license_plate': 'LAG-123',
}


class VehicleServiceTests(TestCase):
	def setUp(self):
		self.driver = make_user('driver@example.com')
		self.other = make_user('other@example.com')
		self.passenger = make_user('passenger@example.com', is_driver=False)

	def test_only_drivers_register_vehicles(self):
		with self.assertRaises(ForbiddenError):
			services.add_vehicle(self.passenger, **VEHICLE)
		self.assertFalse(Vehicle.objects.exists())

	def test_plate_is_unique(self):
		services.add_vehicle(self.driver, **VEHICLE)

		with self.assertRaises(ConflictError):
			services.add_vehicle(self.other, **VEHICLE)

	def test_update_own_vehicle_only(self):
		vehicle = services.add_vehicle(self.driver, **VEHICLE)

		with self.assertRaises(ForbiddenError):
			services.update_vehicle(self.other, vehicle.id, color='Blue')

		updated = services.update_vehicle(self.driver, vehicle.id, color='Blue', make='')
		self.assertEqual(updated.color, 'Blue')
		self.assertEqual(updated.make, 'Toyota')

	def test_update_to_taken_plate(self):
		services.add_vehicle(self.other, **dict(VEHICLE, license_plate='ABJ-777'))
		vehicle = services.add_vehicle(self.driver, **VEHICLE)

		with self.assertRaises(ConflictError):
			services.update_vehicle(self.driver, vehicle.id, license_plate='ABJ-777')

	def test_delete(self):
		vehicle = services.add_vehicle(self.driver, **VEHICLE)

		with self.assertRaises(ForbiddenError):
			services.delete_vehicle(self.other, vehicle.id)

		services.delete_vehicle(self.driver, vehicle.id)
		self.assertFalse(Vehicle.objects.exists())

		with self.assertRaises(VehicleNotFoundError):
			services.delete_vehicle(self.driver, vehicle.id)


class VehicleApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.driver = make_user('driver@example.com')
		self.passenger = make_user('passenger@example.com', is_driver=False)

	def test_add_with_camel_case_plate(self):
		self.client.force_authenticate(user=self.driver)
		payload = dict(VEHICLE)
		payload['licensePlate'] = payload.pop('license_plate')

		response = self.client.post(reverse('vehicles:add-vehicle'), payload, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['vehicle']['license_plate'], 'LAG-123')
		self.assertEqual(response.data['vehicle']['driver'], self.driver.id)

	def test_passenger_gets_forbidden(self):
		self.client.force_authenticate(user=self.passenger)

		response = self.client.post(reverse('vehicles:add-vehicle'), VEHICLE, format='json')

		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['error'], 'forbidden')

	def test_duplicate_plate_conflict(self):
		self.client.force_authenticate(user=self.driver)
		self.client.post(reverse('vehicles:add-vehicle'), VEHICLE, format='json')

		response = self.client.post(reverse('vehicles:add-vehicle'), VEHICLE, format='json')

		self.assertEqual(response.status_code, 409)

	def test_my_vehicles_lists_only_mine(self):
		services.add_vehicle(self.driver, **VEHICLE)
		services.add_vehicle(make_user('x@example.com'), **dict(VEHICLE, license_plate='KAN-1'))
		self.client.force_authenticate(user=self.driver)

		response = self.client.get(reverse('vehicles:my-vehicles'))

		self.assertEqual([v['license_plate'] for v in response.data['vehicles']], ['LAG-123'])

	def test_update_and_delete_endpoints(self):
		vehicle = services.add_vehicle(self.driver, **VEHICLE)
		self.client.force_authenticate(user=self.driver)
		url = reverse('vehicles:vehicle-detail', args=[vehicle.id])

		response = self.client.put(url, {'color': 'Black'}, format='json')
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['vehicle']['color'], 'Black')

		response = self.client.delete(url)
		self.assertEqual(response.status_code, 200)

		missing = self.client.delete(url)
		self.assertEqual(missing.status_code, 404)
