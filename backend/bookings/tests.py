import threading
from datetime import timedelta
from unittest.mock import patch

from django.db import IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from rides.models import Ride
from services.booking_management import (
	cancel_booking,
	create_booking,
	release_seat,
	reserve_seat,
	update_booking_status,
)
from services.exceptions import (
	BookingNotFoundError,
	ConflictError,
	ForbiddenError,
	InvalidStateError,
	RideNotFoundError,
	SoldOutError,
	ValidationFailedError,
)
from services.reviews import add_review, average_rating, list_driver_reviews
from services.ride_management import update_ride_status
from .models import Booking, Review


def make_user(email, is_driver=False):
	return User.objects.create_user(
		username=email,
		email=email,
		password='pass1234',
		name=email.split('@')[0].title(),
		phone='9000000000',
		is_driver=is_driver,
	)


def make_ride(driver, seats=1, **extra):
	fields = {
		'origin': 'Lagos',
		'destination': 'Ibadan',
		'date': timezone.now() + timedelta(days=2),
		'price': 2500.0,
		'seats_available': seats,
	}
	fields.update(extra)
	return Ride.objects.create(driver=driver, **fields)


class InventoryLedgerTests(TestCase):
	def setUp(self):
		self.driver = make_user('driver@example.com', is_driver=True)
		self.ride = make_ride(self.driver, seats=3)

	def test_seat_count_tracks_reservations_and_releases(self):
		with transaction.atomic():
			reserve_seat(self.ride.id)
			reserve_seat(self.ride.id)
			release_seat(self.ride.id)
			reserve_seat(self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 3 - 3 + 1)

	def test_reserve_never_goes_negative(self):
		with transaction.atomic():
			for _ in range(3):
				reserve_seat(self.ride.id)
			with self.assertRaises(SoldOutError):
				reserve_seat(self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)

	def test_guarded_decrement_refuses_stale_seat_count(self):
		# Another transaction already took the last seat after this caller read the row.
		stale = Ride.objects.get(id=self.ride.id)
		stale.seats_available = 1
		Ride.objects.filter(id=self.ride.id).update(seats_available=0)

		with patch('services.booking_management.inventory.lock_ride', return_value=stale):
			with self.assertRaises(SoldOutError):
				with transaction.atomic():
					reserve_seat(self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)

	def test_missing_ride(self):
		with self.assertRaises(RideNotFoundError):
			with transaction.atomic():
				reserve_seat(self.ride.id + 1)
		with self.assertRaises(RideNotFoundError):
			with transaction.atomic():
				release_seat(self.ride.id + 1)

	def test_release_has_no_ceiling(self):
		with transaction.atomic():
			release_seat(self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 4)


class BookingLifecycleTests(TestCase):
	def setUp(self):
		self.driver = make_user('driver@example.com', is_driver=True)
		self.alice = make_user('alice@example.com')
		self.bob = make_user('bob@example.com')
		self.ride = make_ride(self.driver, seats=1)

	def test_last_seat_scenario(self):
		booking = create_booking(self.alice, self.ride.id)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)
		self.assertEqual(booking.status, Booking.PENDING)

		with self.assertRaises(SoldOutError):
			create_booking(self.bob, self.ride.id)

		cancel_booking(self.alice, booking.id)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 1)
		self.assertFalse(Booking.objects.filter(id=booking.id).exists())

		create_booking(self.bob, self.ride.id)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)

	def test_booking_carries_driver_and_vehicles(self):
		self.driver.vehicles.create(
			make='Honda', model='Civic', year=2020, color='Red', license_plate='ABC-001'
		)
		booking = create_booking(self.alice, self.ride.id)

		self.assertEqual(booking.ride.driver, self.driver)
		self.assertEqual([v.license_plate for v in booking.ride.driver.vehicles.all()], ['ABC-001'])

	def test_duplicate_booking_conflicts(self):
		self.ride.seats_available = 3
		self.ride.save()
		create_booking(self.alice, self.ride.id)

		with self.assertRaises(ConflictError):
			create_booking(self.alice, self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 2)

	def test_cancelled_status_booking_does_not_block_rebooking(self):
		self.ride.seats_available = 2
		self.ride.save()
		Booking.objects.create(ride=self.ride, passenger=self.alice, status=Booking.CANCELLED)

		booking = create_booking(self.alice, self.ride.id)

		self.assertEqual(booking.status, Booking.PENDING)

	def test_database_rejects_second_active_booking(self):
		Booking.objects.create(ride=self.ride, passenger=self.alice)

		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				Booking.objects.create(ride=self.ride, passenger=self.alice, status=Booking.CONFIRMED)

	def test_driver_cannot_book_own_ride(self):
		with self.assertRaises(ConflictError):
			create_booking(self.driver, self.ride.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 1)

	def test_missing_or_unknown_ride(self):
		with self.assertRaises(ValidationFailedError):
			create_booking(self.alice, None)
		with self.assertRaises(ValidationFailedError):
			create_booking(self.alice, 'abc')
		with self.assertRaises(RideNotFoundError):
			create_booking(self.alice, self.ride.id + 99)

	def test_ride_no_longer_scheduled(self):
		self.ride.status = Ride.CANCELLED
		self.ride.save()

		with self.assertRaises(InvalidStateError):
			create_booking(self.alice, self.ride.id)

	def test_cancel_rules(self):
		booking = create_booking(self.alice, self.ride.id)

		with self.assertRaises(ForbiddenError):
			cancel_booking(self.bob, booking.id)
		with self.assertRaises(BookingNotFoundError):
			cancel_booking(self.alice, booking.id + 99)

		Booking.objects.filter(id=booking.id).update(status=Booking.COMPLETED)
		with self.assertRaises(InvalidStateError):
			cancel_booking(self.alice, booking.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)

	def test_cancel_confirmed_booking_releases_seat(self):
		booking = create_booking(self.alice, self.ride.id)
		update_booking_status(self.driver, booking.id, Booking.CONFIRMED)

		cancel_booking(self.alice, booking.id)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 1)

	def test_driver_status_update(self):
		booking = create_booking(self.alice, self.ride.id)

		updated = update_booking_status(self.driver, booking.id, Booking.CONFIRMED)
		self.assertEqual(updated.status, Booking.CONFIRMED)

		with self.assertRaises(ForbiddenError):
			update_booking_status(self.alice, booking.id, Booking.COMPLETED)
		with self.assertRaises(ValidationFailedError):
			update_booking_status(self.driver, booking.id, 'DONE')
		with self.assertRaises(BookingNotFoundError):
			update_booking_status(self.driver, booking.id + 99, Booking.CONFIRMED)

	def test_reviving_cancelled_booking_conflicts_with_new_one(self):
		self.ride.seats_available = 2
		self.ride.save()
		first = create_booking(self.alice, self.ride.id)
		update_booking_status(self.driver, first.id, Booking.CANCELLED)
		second = create_booking(self.alice, self.ride.id)

		with self.assertRaises(ConflictError):
			update_booking_status(self.driver, first.id, Booking.PENDING)

		first.refresh_from_db()
		self.assertEqual(first.status, Booking.CANCELLED)
		second.refresh_from_db()
		self.assertEqual(second.status, Booking.PENDING)

	def test_driver_cancellation_keeps_seat_taken(self):
		booking = create_booking(self.alice, self.ride.id)

		update_booking_status(self.driver, booking.id, Booking.CANCELLED)

		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)

	def test_backward_booking_transition_accepted_by_default(self):
		booking = create_booking(self.alice, self.ride.id)
		update_booking_status(self.driver, booking.id, Booking.COMPLETED)

		updated = update_booking_status(self.driver, booking.id, Booking.PENDING)

		self.assertEqual(updated.status, Booking.PENDING)

	@override_settings(ENFORCE_STATUS_TRANSITIONS=True)
	def test_booking_transitions_enforced_when_enabled(self):
		booking = create_booking(self.alice, self.ride.id)

		with self.assertRaises(InvalidStateError):
			update_booking_status(self.driver, booking.id, Booking.COMPLETED)

		update_booking_status(self.driver, booking.id, Booking.CONFIRMED)
		update_booking_status(self.driver, booking.id, Booking.COMPLETED)
		with self.assertRaises(InvalidStateError):
			update_booking_status(self.driver, booking.id, Booking.PENDING)


class ReviewGateTests(TestCase):
	def setUp(self):
		self.driver = make_user('driver@example.com', is_driver=True)
		self.alice = make_user('alice@example.com')
		self.ride = make_ride(self.driver, seats=4)
		self.booking = create_booking(self.alice, self.ride.id)

	def _complete(self, booking):
		update_booking_status(self.driver, booking.id, Booking.CONFIRMED)
		update_ride_status(self.driver, booking.ride_id, Ride.COMPLETED)

	def test_confirm_complete_review_scenario(self):
		update_booking_status(self.driver, self.booking.id, Booking.CONFIRMED)
		update_ride_status(self.driver, self.ride.id, Ride.COMPLETED)
		self.booking.refresh_from_db()
		self.assertEqual(self.booking.status, Booking.COMPLETED)

		review = add_review(self.alice, self.booking.id, 5, 'Smooth ride')
		self.assertEqual(review.rating, 5)
		self.assertEqual(review.booking_id, self.booking.id)

		with self.assertRaises(ConflictError):
			add_review(self.alice, self.booking.id, 4)
		self.assertEqual(Review.objects.filter(booking=self.booking).count(), 1)

	def test_review_before_completion_is_invalid(self):
		with self.assertRaises(InvalidStateError):
			add_review(self.alice, self.booking.id, 5)

		update_booking_status(self.driver, self.booking.id, Booking.CONFIRMED)
		with self.assertRaises(InvalidStateError):
			add_review(self.alice, self.booking.id, 5)

	def test_only_passenger_can_review(self):
		self._complete(self.booking)

		with self.assertRaises(ForbiddenError):
			add_review(self.driver, self.booking.id, 5)
		with self.assertRaises(BookingNotFoundError):
			add_review(self.alice, self.booking.id + 99, 5)

	def test_rating_bounds(self):
		self._complete(self.booking)

		for bad in (0, 6, -1, 4.5, 'abc', None, True):
			with self.subTest(rating=bad):
				with self.assertRaises(ValidationFailedError):
					add_review(self.alice, self.booking.id, bad)
		self.assertFalse(Review.objects.exists())

	def test_every_star_value_accepted(self):
		for stars in range(1, 6):
			with self.subTest(rating=stars):
				passenger = make_user('p%d@example.com' % stars)
				ride = make_ride(self.driver, seats=1)
				booking = create_booking(passenger, ride.id)
				self._complete(booking)

				review = add_review(passenger, booking.id, stars)
				self.assertEqual(review.rating, stars)

	def test_empty_comment_stored_as_null(self):
		self._complete(self.booking)

		review = add_review(self.alice, self.booking.id, '3', '')

		self.assertEqual(review.rating, 3)
		self.assertIsNone(review.comment)


class DriverReputationTests(TestCase):
	def setUp(self):
		self.driver = make_user('driver@example.com', is_driver=True)
		self.other_driver = make_user('other@example.com', is_driver=True)

	def _review(self, driver, passenger, rating):
		ride = make_ride(driver, seats=1)
		booking = Booking.objects.create(ride=ride, passenger=passenger, status=Booking.COMPLETED)
		return Review.objects.create(booking=booking, rating=rating)

	def test_aggregates(self):
		for index, rating in enumerate([5, 5, 4, 3]):
			self._review(self.driver, make_user('p%d@example.com' % index), rating)
		self._review(self.other_driver, make_user('x@example.com'), 1)

		result = list_driver_reviews(self.driver.id)

		self.assertEqual(result['total_reviews'], 4)
		self.assertEqual(result['average_rating'], 4.3)
		self.assertEqual(result['rating_distribution'], {5: 2, 4: 1, 3: 1, 2: 0, 1: 0})

	def test_newest_first(self):
		first = self._review(self.driver, make_user('a@example.com'), 2)
		second = self._review(self.driver, make_user('b@example.com'), 4)
		Review.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(days=1))

		result = list_driver_reviews(self.driver.id)

		self.assertEqual([r.id for r in result['reviews']], [second.id, first.id])

	def test_driver_without_reviews(self):
		result = list_driver_reviews(self.driver.id)

		self.assertEqual(result['total_reviews'], 0)
		self.assertEqual(result['average_rating'], 0)
		self.assertEqual(result['rating_distribution'], {5: 0, 4: 0, 3: 0, 2: 0, 1: 0})

	def test_average_rounds_half_up(self):
		self.assertEqual(average_rating([4, 5]), 4.5)
		self.assertEqual(average_rating([5, 5, 4, 3]), 4.3)
		self.assertEqual(average_rating([1, 2, 2]), 1.7)


class BookingApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.driver = make_user('driver@example.com', is_driver=True)
		self.alice = make_user('alice@example.com')
		self.bob = make_user('bob@example.com')
		self.ride = make_ride(self.driver, seats=1)

	def _as(self, user):
		self.client.force_authenticate(user=user)
		return self.client

	def test_book_with_camel_case_ride_id(self):
		response = self._as(self.alice).post(reverse('bookings:book-ride'), {'rideId': self.ride.id}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['booking']['status'], Booking.PENDING)
		self.assertEqual(response.data['booking']['ride']['driver']['id'], self.driver.id)
		self.assertEqual(response.data['booking']['ride']['seats_available'], 0)

	def test_book_requires_authentication(self):
		response = self.client.post(reverse('bookings:book-ride'), {'rideId': self.ride.id}, format='json')

		self.assertEqual(response.status_code, 401)
		self.assertEqual(response.data['error'], 'not_authenticated')

	def test_book_requires_ride_id(self):
		response = self._as(self.alice).post(reverse('bookings:book-ride'), {}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('ride_id', response.data)

	def test_sold_out_and_conflict_codes(self):
		self._as(self.alice).post(reverse('bookings:book-ride'), {'rideId': self.ride.id}, format='json')

		sold_out = self._as(self.bob).post(reverse('bookings:book-ride'), {'rideId': self.ride.id}, format='json')
		self.assertEqual(sold_out.status_code, 409)
		self.assertEqual(sold_out.data['error'], 'sold_out')

		own = self._as(self.driver).post(reverse('bookings:book-ride'), {'ride_id': self.ride.id}, format='json')
		self.assertEqual(own.status_code, 409)

		missing = self._as(self.bob).post(reverse('bookings:book-ride'), {'rideId': self.ride.id + 50}, format='json')
		self.assertEqual(missing.status_code, 404)

	def test_my_bookings_and_cancel(self):
		self._as(self.alice).post(reverse('bookings:book-ride'), {'rideId': self.ride.id}, format='json')
		booking = Booking.objects.get(passenger=self.alice)

		listing = self._as(self.alice).get(reverse('bookings:my-bookings'))
		self.assertEqual([b['id'] for b in listing.data['bookings']], [booking.id])
		self.assertIsNone(listing.data['bookings'][0]['review'])

		forbidden = self._as(self.bob).delete(reverse('bookings:cancel-booking', args=[booking.id]))
		self.assertEqual(forbidden.status_code, 403)

		response = self._as(self.alice).delete(reverse('bookings:cancel-booking', args=[booking.id]))
		self.assertEqual(response.status_code, 200)
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 1)

	def test_status_endpoint(self):
		booking = create_booking(self.alice, self.ride.id)

		bad = self._as(self.driver).patch(
			reverse('bookings:booking-status', args=[booking.id]), {'status': 'nope'}, format='json'
		)
		self.assertEqual(bad.status_code, 400)

		response = self._as(self.driver).patch(
			reverse('bookings:booking-status', args=[booking.id]), {'status': 'CONFIRMED'}, format='json'
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['booking']['status'], Booking.CONFIRMED)
		self.assertEqual(response.data['booking']['passenger']['id'], self.alice.id)

		forbidden = self._as(self.alice).patch(
			reverse('bookings:booking-status', args=[booking.id]), {'status': 'COMPLETED'}, format='json'
		)
		self.assertEqual(forbidden.status_code, 403)

	def test_status_update_clashing_with_active_booking(self):
		self.ride.seats_available = 2
		self.ride.save()
		first = create_booking(self.alice, self.ride.id)
		update_booking_status(self.driver, first.id, Booking.CANCELLED)
		create_booking(self.alice, self.ride.id)

		response = self._as(self.driver).patch(
			reverse('bookings:booking-status', args=[first.id]), {'status': 'PENDING'}, format='json'
		)

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['error'], 'conflict')

	def test_review_flow_over_http(self):
		booking = create_booking(self.alice, self.ride.id)
		url = reverse('bookings:add-review', args=[booking.id])

		early = self._as(self.alice).post(url, {'rating': 5}, format='json')
		self.assertEqual(early.status_code, 400)
		self.assertEqual(early.data['error'], 'invalid_state')

		update_booking_status(self.driver, booking.id, Booking.CONFIRMED)
		update_ride_status(self.driver, self.ride.id, Ride.COMPLETED)

		out_of_range = self._as(self.alice).post(url, {'rating': 7}, format='json')
		self.assertEqual(out_of_range.status_code, 400)

		created = self._as(self.alice).post(url, {'rating': 5, 'comment': 'Great'}, format='json')
		self.assertEqual(created.status_code, 201)
		self.assertEqual(created.data['review']['driver']['id'], self.driver.id)

		again = self._as(self.alice).post(url, {'rating': 4}, format='json')
		self.assertEqual(again.status_code, 409)

		self.client.force_authenticate(user=None)
		reputation = self.client.get(reverse('bookings:driver-reviews', args=[self.driver.id]))
		self.assertEqual(reputation.status_code, 200)
		self.assertEqual(reputation.data['total_reviews'], 1)
		self.assertEqual(reputation.data['average_rating'], 5.0)
		self.assertEqual(reputation.data['reviews'][0]['passenger']['id'], self.alice.id)
		self.assertEqual(reputation.data['reviews'][0]['ride']['id'], self.ride.id)


class ConcurrentReservationTests(TransactionTestCase):
	def setUp(self):
		if connection.vendor == 'sqlite' and connection.is_in_memory_db():
			self.skipTest('threads cannot share an in-memory SQLite database')
		self.driver = make_user('driver@example.com', is_driver=True)
		self.passengers = [make_user('p%d@example.com' % i) for i in range(2)]
		self.ride = make_ride(self.driver, seats=1)

	def test_two_racers_one_seat(self):
		outcomes = []
		barrier = threading.Barrier(len(self.passengers))

		def attempt(passenger):
			barrier.wait()
			try:
				create_booking(passenger, self.ride.id)
				outcomes.append('booked')
			except SoldOutError:
				outcomes.append('sold_out')
			except Exception as exc:
				outcomes.append(type(exc).__name__)
			finally:
				connection.close()

		threads = [threading.Thread(target=attempt, args=(p,)) for p in self.passengers]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join()

		self.assertEqual(sorted(outcomes), ['booked', 'sold_out'])
		self.ride.refresh_from_db()
		self.assertEqual(self.ride.seats_available, 0)
		self.assertEqual(Booking.objects.filter(ride=self.ride).count(), 1)
