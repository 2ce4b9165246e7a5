"""Tests for /api/auth/ endpoints and expiring token authentication."""

from datetime import timedelta

from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from accounts.services import register_user


class RegisterApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_creates_customer(self):
        response = self.client.post('/api/auth/register/', {
            'name': 'Olena',
            'email': 'Olena@Example.com',
            'password': 'secret1',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        user = response.json()
        self.assertEqual(set(user), {'id', 'name', 'email', 'roles', 'created_at', 'updated_at'})
        self.assertEqual(user['email'], 'olena@example.com')
        self.assertEqual(user['name'], 'Olena')
        self.assertEqual(user['roles'], ['customer'])
        self.assertNotIn('password', user)
        self.assertTrue(User.objects.filter(username='olena@example.com').exists())

    def test_register_duplicate_email_conflicts(self):
        register_user('First', 'dup@example.com', 'secret1')
        response = self.client.post('/api/auth/register/', {
            'name': 'Second',
            'email': 'DUP@example.com',
            'password': 'secret2',
        }, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['message'], 'User with this email already exists')

    def test_register_validation(self):
        cases = [
            {'name': '', 'email': 'a@example.com', 'password': 'secret1'},
            {'name': 'A', 'email': 'a@example.com', 'password': '123'},
            {'name': 'A', 'email': 'not-an-email', 'password': 'secret1'},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                response = self.client.post('/api/auth/register/', payload, format='json')
                self.assertEqual(response.status_code, 400)
                self.assertIn('message', response.json())


class LoginApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = register_user('Ivan', 'ivan@example.com', 'secret1')

    def login(self, email='ivan@example.com', password='secret1'):
        return self.client.post('/api/auth/login/', {'email': email, 'password': password}, format='json')

    def test_login_returns_token_and_user(self):
        response = self.login()

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['token'], Token.objects.get(user=self.user).key)
        self.assertEqual(data['user']['id'], self.user.pk)

    def test_login_rotates_token(self):
        first = self.login().json()['token']
        second = self.login().json()['token']

        self.assertNotEqual(first, second)
        self.assertEqual(Token.objects.filter(user=self.user).count(), 1)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        wrong_password = self.login(password='nope123')
        unknown_email = self.login(email='ghost@example.com')

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_email.json())

    def test_login_requires_both_fields(self):
        response = self.client.post('/api/auth/login/', {'email': 'ivan@example.com'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_me_with_bearer_token(self):
        token = self.login().json()['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'ivan@example.com')

    def test_me_with_token_keyword(self):
        token = self.login().json()['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token}')

        self.assertEqual(self.client.get('/api/auth/me/').status_code, 200)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, 401)

    def test_expired_token_is_rejected_and_deleted(self):
        token = self.login().json()['token']
        Token.objects.filter(key=token).update(created=timezone.now() - timedelta(days=8))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Token has expired')
        self.assertFalse(Token.objects.filter(key=token).exists())

    def test_logout_revokes_token(self):
        token = self.login().json()['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.post('/api/auth/logout/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Token.objects.filter(user=self.user).exists())
        self.assertEqual(self.client.get('/api/auth/me/').status_code, 401)
