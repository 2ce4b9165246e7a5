"""Tests for role management: API, service and back-office gates."""

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from accounts.models import roles_for
from accounts.services import update_roles
from storekit.errors import ValidationFailed


def make_user(email, is_staff=False):
    return User.objects.create_user(username=email, email=email, password='secret1', is_staff=is_staff)


class UpdateRolesServiceTests(TestCase):
    def setUp(self):
        self.admin = make_user('admin@example.com', is_staff=True)
        self.customer = make_user('customer@example.com')

    def test_promote_customer(self):
        update_roles(self.admin, self.customer, ['admin', 'customer'])
        self.customer.refresh_from_db()
        self.assertEqual(roles_for(self.customer), ['admin', 'customer'])

    def test_invalid_roles(self):
        for roles in (None, 'admin', ['owner'], [1]):
            with self.subTest(roles=roles):
                with self.assertRaises(ValidationFailed):
                    update_roles(self.admin, self.customer, roles)

    def test_last_admin_cannot_demote_self(self):
        with self.assertRaises(ValidationFailed) as ctx:
            update_roles(self.admin, self.admin, ['customer'])
        self.assertEqual(ctx.exception.message, 'Cannot remove the last administrator role.')
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_staff)

    def test_admin_can_demote_self_when_another_admin_exists(self):
        make_user('second@example.com', is_staff=True)
        update_roles(self.admin, self.admin, ['customer'])
        self.admin.refresh_from_db()
        self.assertFalse(self.admin.is_staff)


class UserAdminApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user('admin@example.com', is_staff=True)
        self.customer = make_user('customer@example.com')

    def test_anonymous_gets_401_and_customer_403(self):
        self.assertEqual(self.client.get('/api/admin/users/').status_code, 401)

        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get('/api/admin/users/').status_code, 403)

    def test_list_envelope(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get('/api/admin/users/', {'limit': 1})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['totalUsers'], 2)
        self.assertEqual(data['totalPages'], 2)
        self.assertEqual(data['currentPage'], 1)
        self.assertEqual(len(data['users']), 1)

    def test_update_roles(self):
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            f'/api/admin/users/{self.customer.pk}/', {'roles': ['admin', 'customer']}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['roles'], ['admin', 'customer'])

    def test_update_roles_unknown_user(self):
        self.client.force_authenticate(self.admin)
        response = self.client.put('/api/admin/users/9999/', {'roles': ['customer']}, format='json')
        self.assertEqual(response.status_code, 404)

    def test_last_admin_self_demotion_is_400(self):
        self.client.force_authenticate(self.admin)
        response = self.client.put(f'/api/admin/users/{self.admin.pk}/', {'roles': ['customer']}, format='json')
        self.assertEqual(response.status_code, 400)


class BackofficeAccessTests(TestCase):
    def setUp(self):
        self.admin = make_user('admin@example.com', is_staff=True)
        self.customer = make_user('customer@example.com')

    def test_anonymous_redirected_to_login(self):
        response = self.client.get(reverse('admin_users'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response['Location'])

    def test_customer_forbidden(self):
        self.client.force_login(self.customer)
        self.assertEqual(self.client.get(reverse('admin_users')).status_code, 403)

    def test_admin_sees_users_and_edits_roles(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.client.get(reverse('admin_users')).status_code, 200)

        response = self.client.post(
            reverse('admin_user_edit', args=[self.customer.pk]), {'roles': ['admin', 'customer']}
        )

        self.assertRedirects(response, reverse('admin_users'))
        self.customer.refresh_from_db()
        self.assertTrue(self.customer.is_staff)
