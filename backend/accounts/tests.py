from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from .models import User


class RegistrationTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.payload = {
			'name': 'Ada Driver',
			'email': 'Ada@Example.com',
			'password': 'pass1234',
			'phone': '9000000000',
			'is_driver': True,
		}

	def test_register_returns_user_and_tokens(self):
		response = self.client.post(reverse('accounts:register'), self.payload, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['user']['email'], 'ada@example.com')
		self.assertTrue(response.data['user']['is_driver'])
		self.assertIn('access', response.data['tokens'])
		self.assertIn('refresh', response.data['tokens'])

		user = User.objects.get(email='ada@example.com')
		self.assertTrue(user.check_password('pass1234'))

	def test_passenger_is_default_role(self):
		del self.payload['is_driver']

		response = self.client.post(reverse('accounts:register'), self.payload, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertFalse(response.data['user']['is_driver'])

	def test_duplicate_email_rejected(self):
		self.client.post(reverse('accounts:register'), self.payload, format='json')
		self.payload['email'] = 'ada@example.com'

		response = self.client.post(reverse('accounts:register'), self.payload, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('email', response.data)
		self.assertEqual(User.objects.count(), 1)

	def test_missing_fields(self):
		response = self.client.post(reverse('accounts:register'), {'email': 'x@example.com'}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('name', response.data)
		self.assertIn('password', response.data)


class LoginTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.user = User.objects.create_user(
			username='bola@example.com',
			email='bola@example.com',
			password='pass1234',
			name='Bola',
		)

	def test_login_issues_tokens_for_user(self):
		response = self.client.post(
			reverse('accounts:login'),
			{'email': 'bola@example.com', 'password': 'pass1234'},
			format='json',
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['user']['id'], self.user.id)
		self.assertEqual(response.data['token'], response.data['tokens']['access'])
		token = AccessToken(response.data['token'])
		self.assertEqual(str(token['user_id']), str(self.user.id))

	def test_bad_credentials(self):
		response = self.client.post(
			reverse('accounts:login'),
			{'email': 'bola@example.com', 'password': 'wrong'},
			format='json',
		)

		self.assertEqual(response.status_code, 400)

	def test_refresh(self):
		login = self.client.post(
			reverse('accounts:login'),
			{'email': 'bola@example.com', 'password': 'pass1234'},
			format='json',
		)

		response = self.client.post(
			reverse('accounts:refresh'), {'refresh': login.data['tokens']['refresh']}, format='json'
		)
		self.assertEqual(response.status_code, 200)
		self.assertIn('access', response.data)

		bad = self.client.post(reverse('accounts:refresh'), {'refresh': 'garbage'}, format='json')
		self.assertEqual(bad.status_code, 401)

		missing = self.client.post(reverse('accounts:refresh'), {}, format='json')
		self.assertEqual(missing.status_code, 400)


class ProfileTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.user = User.objects.create_user(
			username='chi@example.com',
			email='chi@example.com',
			password='pass1234',
			name='Chi',
		)

	def test_profile_requires_authentication(self):
		response = self.client.get(reverse('profile:profile'))

		self.assertEqual(response.status_code, 401)
		self.assertEqual(response.data['error'], 'not_authenticated')

	def test_profile_with_bearer_token(self):
		token = AccessToken.for_user(self.user)
		self.client.credentials(HTTP_AUTHORIZATION='Bearer %s' % token)

		response = self.client.get(reverse('profile:profile'))

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['user']['email'], 'chi@example.com')

	def test_update_profile(self):
		self.client.force_authenticate(user=self.user)

		response = self.client.put(
			reverse('profile:update'), {'phone': '8000000000', 'is_driver': True}, format='json'
		)

		self.assertEqual(response.status_code, 200)
		self.user.refresh_from_db()
		self.assertEqual(self.user.phone, '8000000000')
		self.assertTrue(self.user.is_driver)
		self.assertEqual(self.user.name, 'Chi')
