"""
Tests for authentication and account management.
"""

import re

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from .serializers import RegisterSerializer, UserSerializer

User = get_user_model()


class AccountModelTests(TestCase):

    def test_email_normalized(self):
        user = User.objects.create_user(email='  Jane.Doe@Example.COM ', password='Secret123', username='jane')
        self.assertEqual(user.email, 'jane.doe@example.com')
        self.assertEqual(user.role, 'user')

    def test_username_derived_from_email(self):
        User.objects.create_user(email='sam.lee@example.com', password='Secret123')
        second = User.objects.create_user(email='sam.lee@other.com', password='Secret123')
        self.assertEqual(second.username, 'sam_lee_1')

    def test_short_derived_username_is_padded(self):
        valid = re.compile(r'^[A-Za-z0-9_]{3,30}$')
        first = User.objects.create_user(email='ab@example.com', password='Secret123')
        second = User.objects.create_user(email='ab@other.com', password='Secret123')
        single = User.objects.create_user(email='j@example.com', password='Secret123')
        self.assertEqual(first.username, 'ab_user')
        self.assertEqual(second.username, 'ab_user_1')
        self.assertEqual(single.username, 'j_user')
        for user in (first, second, single):
            self.assertRegex(user.username, valid)

    def test_derived_username_ascii_and_capped(self):
        long_local = 'x' * 40
        User.objects.create_user(email=f'{long_local}@example.com', password='Secret123')
        second = User.objects.create_user(email=f'{long_local}@other.com', password='Secret123')
        self.assertEqual(second.username, 'x' * 26 + '_1')
        accented = User.objects.create_user(email='josé@example.com', password='Secret123')
        self.assertEqual(accented.username, 'jos_')

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email='root@example.com', password='Secret123', username='root')
        self.assertTrue(user.is_admin)

    def test_password_never_serialized(self):
        user = User.objects.create_user(email='a@example.com', password='Secret123', username='alice')
        self.assertNotIn('password', UserSerializer(user).data)

    def test_weak_password_rejected(self):
        serializer = RegisterSerializer(data={'username': 'bob', 'email': 'bob@example.com', 'password': 'abcdef'})
        self.assertFalse(serializer.is_valid())
        self.assertIn('password', serializer.errors)


class AuthApiTests(APITestCase):

    def register(self, **overrides):
        data = {'username': 'new_user', 'email': 'New@Example.com', 'password': 'Secret123'}
        data.update(overrides)
        return self.client.post('/api/auth/register/', data, format='json')

    def test_register(self):
        response = self.register()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = response.data['data']['user']
        self.assertEqual(user['email'], 'new@example.com')
        self.assertEqual(user['role'], 'user')
        self.assertNotIn('password', user)
        self.assertTrue(Token.objects.filter(key=response.data['data']['token']).exists())

    def test_register_cannot_choose_role(self):
        response = self.register(role='admin')
        self.assertEqual(response.data['data']['user']['role'], 'user')

    def test_register_duplicate_email(self):
        self.register()
        response = self.register(username='other_user', email='new@example.com')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_register_invalid_username(self):
        response = self.register(username='bad name!')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        self.register()
        response = self.client.post(
            '/api/auth/login/', {'email': 'NEW@example.com', 'password': 'Secret123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('token', response.data['data'])

    def test_login_wrong_password(self):
        self.register()
        response = self.client.post(
            '/api/auth/login/', {'email': 'new@example.com', 'password': 'Wrong123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid email or password')

    def test_profile_with_token(self):
        token = self.register().data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
        response = self.client.get('/api/auth/profile/')
        self.assertEqual(response.data['data']['user']['username'], 'new_user')

        response = self.client.put('/api/auth/profile/', {'username': 'renamed'}, format='json')
        self.assertEqual(response.data['data']['user']['username'], 'renamed')

    def test_profile_requires_auth(self):
        response = self.client.get('/api/auth/profile/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_change_password(self):
        token = self.register().data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
        response = self.client.post('/api/auth/change-password/', {
            'current_password': 'Wrong123', 'new_password': 'Newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post('/api/auth/change-password/', {
            'current_password': 'Secret123', 'new_password': 'Newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(User.objects.get(username='new_user').check_password('Newpass123'))

    def test_refresh_token_rotates(self):
        old = self.register().data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {old}')
        new = self.client.post('/api/auth/refresh-token/').data['data']['token']
        self.assertNotEqual(old, new)
        self.assertFalse(Token.objects.filter(key=old).exists())


class UserAdminApiTests(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='Secret123', username='site_admin', role='admin'
        )
        self.member = User.objects.create_user(
            email='member@example.com', password='Secret123', username='member'
        )
        self.client.force_authenticate(self.admin)

    def test_regular_user_forbidden(self):
        self.client.force_authenticate(self.member)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied. Admin privileges required.')

    def test_list_filters_by_role(self):
        response = self.client.get('/api/users/', {'role': 'user'})
        users = response.data['data']['users']
        self.assertEqual([u['username'] for u in users], ['member'])

    def test_search(self):
        response = self.client.get('/api/users/', {'search': 'ADMIN@'})
        self.assertEqual(response.data['data']['pagination']['totalRecords'], 1)

    def test_create_with_role(self):
        response = self.client.post('/api/users/', {
            'username': 'editor', 'email': 'editor@example.com', 'password': 'Secret123', 'role': 'admin'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['user']['role'], 'admin')

    def test_update_without_password(self):
        response = self.client.put(f'/api/users/{self.member.id}/', {
            'username': 'member2', 'email': 'member@example.com'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.member.refresh_from_db()
        self.assertEqual(self.member.username, 'member2')
        self.assertTrue(self.member.check_password('Secret123'))

    def test_change_role(self):
        response = self.client.patch(f'/api/users/{self.member.id}/role/', {'role': 'admin'}, format='json')
        self.assertEqual(response.data['data']['user']['role'], 'admin')

    def test_invalid_role(self):
        response = self.client.patch(f'/api/users/{self.member.id}/role/', {'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid role. Must be either admin or user')

    def test_delete(self):
        response = self.client.delete(f'/api/users/{self.member.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(id=self.member.id).exists())

    def test_stats(self):
        response = self.client.get('/api/users/admin/stats/')
        self.assertEqual(response.data['data'], {
            'totalUsers': 2,
            'adminUsers': 1,
            'regularUsers': 1,
            'recentUsers': 2,
        })
