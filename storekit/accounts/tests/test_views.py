"""Tests for HTML login / register / profile views."""

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from accounts.services import register_user


class AuthViewsTests(TestCase):
    def test_register_logs_in(self):
        response = self.client.post(reverse('register'), {
            'name': 'Taras',
            'email': 'taras@example.com',
            'password1': 'secret1',
            'password2': 'secret1',
        })

        self.assertRedirects(response, reverse('home'))
        user = User.objects.get(email='taras@example.com')
        self.assertEqual(user.profile.name, 'Taras')
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)

    def test_register_password_mismatch(self):
        response = self.client.post(reverse('register'), {
            'name': 'Taras',
            'email': 'taras@example.com',
            'password1': 'secret1',
            'password2': 'secret2',
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.exists())

    def test_register_duplicate_email_shows_field_error(self):
        register_user('Taras', 'taras@example.com', 'secret1')

        response = self.client.post(reverse('register'), {
            'name': 'Other',
            'email': 'taras@example.com',
            'password1': 'secret1',
            'password2': 'secret1',
        })

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].has_error('email'))

    def test_login_and_logout(self):
        register_user('Taras', 'taras@example.com', 'secret1')

        response = self.client.post(reverse('login'), {'email': 'TARAS@example.com', 'password': 'secret1'})
        self.assertRedirects(response, reverse('home'))
        self.assertIn('_auth_user_id', self.client.session)

        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, reverse('home'))
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_login_invalid_credentials(self):
        response = self.client.post(reverse('login'), {'email': 'nobody@example.com', 'password': 'secret1'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('Invalid email or password', response.context['form'].non_field_errors())

    def test_profile_requires_login(self):
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, 302)

    def test_profile_update_name(self):
        user = register_user('Taras', 'taras@example.com', 'secret1')
        self.client.force_login(user)

        response = self.client.post(reverse('profile'), {'name': 'Тарас'})

        self.assertRedirects(response, reverse('profile'))
        user.profile.refresh_from_db()
        self.assertEqual(user.profile.name, 'Тарас')
