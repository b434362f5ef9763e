# apps/api/tests/test_auth_api.py
"""
Tests for cookie based JWT login, refresh and logout.
"""
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.api.authentication import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from apps.tenants.models import Tenant

User = get_user_model()


class CookieAuthTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.tenant = Tenant.objects.create(name='Elite Motors', subdomain='test-auth', is_default=True)
        cls.closed_tenant = Tenant.objects.create(name='Closed Motors', subdomain='test-auth-closed', is_active=False)
        cls.user = User.objects.create_user(username='clerk', password='testpass123', tenant=cls.tenant)
        cls.closed_user = User.objects.create_user(
            username='former', password='testpass123', tenant=cls.closed_tenant,
        )

    def setUp(self):
        self.client = APIClient()

    def test_login_sets_httponly_cookies(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'clerk', 'password': 'testpass123'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['tenant'], self.tenant.id)
        self.assertTrue(response.cookies[ACCESS_TOKEN_COOKIE]['httponly'])
        self.assertTrue(response.cookies[REFRESH_TOKEN_COOKIE]['httponly'])
        self.assertNotIn('access', response.data['data'])

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'clerk', 'password': 'nope'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_access_cookie_authenticates(self):
        self.client.post('/api/v1/auth/login/', {'username': 'clerk', 'password': 'testpass123'}, format='json')
        response = self.client.get('/api/v1/billing/list/', {'month': '2099-01'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['bills'], [])

    def test_bearer_header_authenticates(self):
        token = RefreshToken.for_user(self.user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_invalid_cookie_falls_back_to_header(self):
        token = RefreshToken.for_user(self.user).access_token
        self.client.cookies[ACCESS_TOKEN_COOKIE] = 'garbage'
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unauthenticated_request_rejected(self):
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_inactive_tenant_token_rejected(self):
        token = RefreshToken.for_user(self.closed_user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Organization is inactive')

    def test_refresh_without_cookie(self):
        response = self.client.post('/api/v1/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_refresh_issues_new_access_cookie(self):
        self.client.cookies[REFRESH_TOKEN_COOKIE] = str(RefreshToken.for_user(self.user))
        response = self.client.post('/api/v1/auth/refresh/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(ACCESS_TOKEN_COOKIE, response.cookies)

    def test_logout_clears_cookies(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post('/api/v1/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies[ACCESS_TOKEN_COOKIE].value, '')
