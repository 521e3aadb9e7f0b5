from datetime import datetime, timedelta

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIRequestFactory, force_authenticate

from accounts.models import User
from bookings.models import Booking
from vehicles.models import Vehicle
from .models import Ride
from .views import (
	create_ride,
	delete_ride,
	get_all_rides,
	get_my_rides,
	search_rides,
	update_ride_status,
)


def make_user(email, is_driver=False, name=None):
	return User.objects.create_user(
		username=email,
		email=email,
		password='pass1234',
		name=name or email.split('@')[0],
		phone='9000000000',
		is_driver=is_driver,
	)


class RidePublishingTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.driver = make_user('driver@example.com', is_driver=True)
		self.passenger = make_user('passenger@example.com')

	def test_create_ride_combines_date_and_time(self):
		request = self.factory.post('/api/ride/create/', {
			'origin': 'Lagos',
			'destination': 'Ibadan',
			'date': '2026-11-02',
			'time': '08:30',
			'price': '2500.50',
			'seatsAvailable': '3',
		}, format='json')
		force_authenticate(request, user=self.driver)
		response = create_ride(request)

		self.assertEqual(response.status_code, 201)
		ride = Ride.objects.get(id=response.data['ride']['id'])
		expected = timezone.make_aware(datetime(2026, 11, 2, 8, 30), timezone.get_current_timezone())
		self.assertEqual(ride.date, expected)
		self.assertEqual(ride.price, 2500.5)
		self.assertEqual(ride.seats_available, 3)
		self.assertEqual(ride.status, Ride.SCHEDULED)
		self.assertEqual(ride.driver, self.driver)

	def test_create_ride_rejects_passengers(self):
		request = self.factory.post('/api/ride/create/', {
			'origin': 'Lagos',
			'destination': 'Ibadan',
			'date': '2026-11-02',
			'time': '08:30',
			'price': 10,
			'seats_available': 2,
		}, format='json')
		force_authenticate(request, user=self.passenger)
		response = create_ride(request)

		self.assertEqual(response.status_code, 403)
		self.assertFalse(Ride.objects.exists())

	def test_create_ride_validates_input(self):
		request = self.factory.post('/api/ride/create/', {
			'origin': 'Lagos',
			'date': 'not-a-date',
			'time': '08:30',
			'price': 10,
			'seats_available': -1,
		}, format='json')
		force_authenticate(request, user=self.driver)
		response = create_ride(request)

		self.assertEqual(response.status_code, 400)
		self.assertIn('destination', response.data)
		self.assertIn('date', response.data)
		self.assertIn('seats_available', response.data)

	def test_create_ride_requires_authentication(self):
		request = self.factory.post('/api/ride/create/', {}, format='json')
		response = create_ride(request)

		self.assertEqual(response.status_code, 401)


class RideSearchTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.driver = make_user('driver@example.com', is_driver=True)
		Vehicle.objects.create(
			driver=self.driver, make='Toyota', model='Corolla', year=2019,
			color='Blue', license_plate='LAG-123'
		)
		now = timezone.now()
		self.later = Ride.objects.create(
			driver=self.driver, origin='Lagos Island', destination='Ibadan Central',
			date=now + timedelta(days=3), price=20, seats_available=2
		)
		self.sooner = Ride.objects.create(
			driver=self.driver, origin='LAGOS mainland', destination='ibadan',
			date=now + timedelta(days=1), price=25, seats_available=1
		)
		self.full = Ride.objects.create(
			driver=self.driver, origin='Lagos', destination='Ibadan',
			date=now + timedelta(days=2), price=25, seats_available=0
		)
		self.cancelled = Ride.objects.create(
			driver=self.driver, origin='Lagos', destination='Ibadan',
			date=now + timedelta(days=2), price=25, seats_available=4,
			status=Ride.CANCELLED
		)

	def test_search_matches_substrings_case_insensitively(self):
		request = self.factory.get('/api/ride/search/', {'source': 'lagos', 'destination': 'IBADAN'})
		response = search_rides(request)

		self.assertEqual(response.status_code, 200)
		ids = [ride['id'] for ride in response.data['rides']]
		self.assertEqual(ids, [self.sooner.id, self.later.id])
		self.assertEqual(response.data['rides'][0]['driver']['vehicles'][0]['license_plate'], 'LAG-123')

	def test_search_without_match_returns_not_found(self):
		request = self.factory.get('/api/ride/search/', {'source': 'Abuja', 'destination': 'Kano'})
		response = search_rides(request)

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.data['message'], 'No rides found')

	def test_search_requires_both_places(self):
		request = self.factory.get('/api/ride/search/', {'source': 'Lagos'})
		response = search_rides(request)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')

	def test_all_rides_lists_only_open_rides(self):
		Booking.objects.create(ride=self.later, passenger=make_user('p@example.com'))
		request = self.factory.get('/api/ride/all/')
		response = get_all_rides(request)

		ids = [ride['id'] for ride in response.data['rides']]
		self.assertEqual(ids, [self.sooner.id, self.later.id])
		self.assertEqual(len(response.data['rides'][1]['bookings']), 1)


class RideStatusTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.driver = make_user('driver@example.com', is_driver=True)
		self.other_driver = make_user('other@example.com', is_driver=True)
		self.passenger_one = make_user('one@example.com')
		self.passenger_two = make_user('two@example.com')
		self.ride = Ride.objects.create(
			driver=self.driver, origin='Accra', destination='Kumasi',
			date=timezone.now() + timedelta(days=1), price=15, seats_available=1
		)
		self.confirmed = Booking.objects.create(
			ride=self.ride, passenger=self.passenger_one, status=Booking.CONFIRMED
		)
		self.pending = Booking.objects.create(
			ride=self.ride, passenger=self.passenger_two, status=Booking.PENDING
		)

	def _patch_status(self, user, ride_id, new_status):
		request = self.factory.patch('/api/ride/%d/status/' % ride_id, {'status': new_status}, format='json')
		force_authenticate(request, user=user)
		return update_ride_status(request, ride_id=ride_id)

	def test_completing_ride_completes_confirmed_bookings_only(self):
		response = self._patch_status(self.driver, self.ride.id, Ride.COMPLETED)

		self.assertEqual(response.status_code, 200)
		self.ride.refresh_from_db()
		self.confirmed.refresh_from_db()
		self.pending.refresh_from_db()

		self.assertEqual(self.ride.status, Ride.COMPLETED)
		self.assertEqual(self.confirmed.status, Booking.COMPLETED)
		self.assertEqual(self.pending.status, Booking.PENDING)

	def test_other_statuses_leave_bookings_alone(self):
		self._patch_status(self.driver, self.ride.id, Ride.IN_PROGRESS)

		self.confirmed.refresh_from_db()
		self.assertEqual(self.confirmed.status, Booking.CONFIRMED)

	def test_unknown_status_is_rejected(self):
		response = self._patch_status(self.driver, self.ride.id, 'FINISHED')

		self.assertEqual(response.status_code, 400)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, Ride.SCHEDULED)

	def test_only_owner_can_update(self):
		response = self._patch_status(self.other_driver, self.ride.id, Ride.CANCELLED)

		self.assertEqual(response.status_code, 403)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, Ride.SCHEDULED)

	def test_missing_ride(self):
		response = self._patch_status(self.driver, self.ride.id + 100, Ride.CANCELLED)

		self.assertEqual(response.status_code, 404)

	def test_backward_transition_is_accepted_by_default(self):
		self.ride.status = Ride.COMPLETED
		self.ride.save(update_fields=['status'])

		response = self._patch_status(self.driver, self.ride.id, Ride.SCHEDULED)

		self.assertEqual(response.status_code, 200)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, Ride.SCHEDULED)

	@override_settings(ENFORCE_STATUS_TRANSITIONS=True)
	def test_backward_transition_rejected_when_enforced(self):
		self.ride.status = Ride.COMPLETED
		self.ride.save(update_fields=['status'])

		response = self._patch_status(self.driver, self.ride.id, Ride.SCHEDULED)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'invalid_state')
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.status, Ride.COMPLETED)

	@override_settings(ENFORCE_STATUS_TRANSITIONS=True)
	def test_forward_path_allowed_when_enforced(self):
		self.assertEqual(self._patch_status(self.driver, self.ride.id, Ride.IN_PROGRESS).status_code, 200)
		self.assertEqual(self._patch_status(self.driver, self.ride.id, Ride.COMPLETED).status_code, 200)

		self.confirmed.refresh_from_db()
		self.assertEqual(self.confirmed.status, Booking.COMPLETED)

	def test_my_rides_include_bookings(self):
		request = self.factory.get('/api/ride/myrides/')
		force_authenticate(request, user=self.driver)
		response = get_my_rides(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(len(response.data['rides']), 1)
		passengers = {b['passenger']['id'] for b in response.data['rides'][0]['bookings']}
		self.assertEqual(passengers, {self.passenger_one.id, self.passenger_two.id})


class RideDeletionTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.driver = make_user('driver@example.com', is_driver=True)
		self.passenger = make_user('passenger@example.com')
		self.ride = Ride.objects.create(
			driver=self.driver, origin='Nairobi', destination='Mombasa',
			date=timezone.now() + timedelta(days=1), price=30, seats_available=3
		)

	def _delete(self, user, ride_id):
		request = self.factory.delete('/api/ride/%d/' % ride_id)
		force_authenticate(request, user=user)
		return delete_ride(request, ride_id=ride_id)

	def test_delete_booking_free_ride(self):
		response = self._delete(self.driver, self.ride.id)

		self.assertEqual(response.status_code, 200)
		self.assertFalse(Ride.objects.filter(id=self.ride.id).exists())

	def test_delete_with_any_booking_conflicts(self):
		Booking.objects.create(ride=self.ride, passenger=self.passenger, status=Booking.CANCELLED)

		response = self._delete(self.driver, self.ride.id)

		self.assertEqual(response.status_code, 409)
		self.assertIn('Cancel the ride instead', response.data['message'])
		self.assertTrue(Ride.objects.filter(id=self.ride.id).exists())

	def test_delete_requires_owner(self):
		response = self._delete(self.passenger, self.ride.id)

		self.assertEqual(response.status_code, 403)
		self.assertTrue(Ride.objects.filter(id=self.ride.id).exists())

	def test_delete_missing_ride(self):
		response = self._delete(self.driver, self.ride.id + 1)

		self.assertEqual(response.status_code, 404)
