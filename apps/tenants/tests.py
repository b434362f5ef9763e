# apps/tenants/tests.py
"""
Tests for Tenant, TenantSettings, tenant scoping and TenantMiddleware.
"""
from django.db import IntegrityError
from django.http import HttpResponse
from django.test import RequestFactory, TestCase

from apps.clients.models import Client
from apps.tenants.middleware import TenantMiddleware
from apps.tenants.models import Tenant, TenantSettings
from shared.managers import get_current_tenant, set_current_tenant
from shared.models import TenantContext
from users.models import User


class TenantModelTestCase(TestCase):
    """Tests for the Tenant model and multi-tenant isolation."""

    def test_create_tenant(self):
        tenant = Tenant.objects.create(name='Elite Motors', subdomain='elite')
        self.assertTrue(tenant.is_active)
        self.assertEqual(str(tenant), 'Elite Motors')

    def test_duplicate_subdomain(self):
        Tenant.objects.create(name='First', subdomain='unique-sub')
        with self.assertRaises(IntegrityError):
            Tenant.objects.create(name='Second', subdomain='unique-sub')

    def test_settings_auto_created(self):
        tenant = Tenant.objects.create(name='Settings Co', subdomain='test-settings')
        settings = TenantSettings.objects.get(tenant=tenant)
        self.assertEqual(settings.company_name, 'Settings Co')
        self.assertEqual(settings.timezone, 'UTC')

    def test_tenant_isolation(self):
        tenant_a = Tenant.objects.create(name='Tenant A', subdomain='test-iso-a')
        tenant_b = Tenant.objects.create(name='Tenant B', subdomain='test-iso-b')
        Client.objects.create(tenant=tenant_a, name='Only A', phone='+91 1')

        with TenantContext(tenant_a):
            self.assertEqual(Client.objects.count(), 1)
        with TenantContext(tenant_b):
            self.assertEqual(Client.objects.count(), 0)

    def test_no_tenant_means_no_rows(self):
        tenant = Tenant.objects.create(name='Tenant A', subdomain='test-none')
        Client.objects.create(tenant=tenant, name='Hidden', phone='+91 2')
        set_current_tenant(None)
        self.assertEqual(Client.objects.count(), 0)
        self.assertEqual(Client.objects.all_tenants().count(), 1)

    def test_context_restores_previous_tenant(self):
        outer = Tenant.objects.create(name='Outer', subdomain='test-outer')
        inner = Tenant.objects.create(name='Inner', subdomain='test-inner')
        set_current_tenant(outer)
        try:
            with TenantContext(inner):
                self.assertEqual(get_current_tenant(), inner)
            self.assertEqual(get_current_tenant(), outer)
        finally:
            set_current_tenant(None)


class TenantMiddlewareTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.default = Tenant.objects.create(name='Default', subdomain='test-default', is_default=True)
        cls.acme = Tenant.objects.create(name='Acme', subdomain='acme')
        cls.member = User.objects.create_user(username='acme-user', password='x', tenant=cls.acme)

    def setUp(self):
        self.factory = RequestFactory()
        self.seen = []

        def view(request):
            self.seen.append((request.tenant, get_current_tenant()))
            return HttpResponse('ok')

        self.middleware = TenantMiddleware(view)

    def test_subdomain(self):
        request = self.factory.get('/api/v1/clients/', HTTP_HOST='acme.localhost')
        self.middleware(request)
        self.assertEqual(self.seen, [(self.acme, self.acme)])
        self.assertIsNone(get_current_tenant())

    def test_default_tenant(self):
        request = self.factory.get('/api/v1/clients/', HTTP_HOST='localhost')
        self.middleware(request)
        self.assertEqual(self.seen[0][0], self.default)

    def test_header_honoured_for_members_only(self):
        request = self.factory.get('/api/v1/clients/', HTTP_X_TENANT_ID=str(self.acme.pk))
        request.user = self.member
        self.middleware(request)
        self.assertEqual(self.seen[0][0], self.acme)

        outsider = User.objects.create_user(username='outsider', password='x', tenant=self.default)
        request = self.factory.get('/api/v1/clients/', HTTP_X_TENANT_ID=str(self.acme.pk))
        request.user = outsider
        self.middleware(request)
        self.assertEqual(self.seen[1][0], self.default)

    def test_no_tenant_rejected(self):
        Tenant.objects.filter(pk=self.default.pk).update(is_default=False)
        request = self.factory.get('/api/v1/clients/', HTTP_HOST='localhost')
        response = self.middleware(request)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.seen, [])

    def test_exempt_path_without_tenant(self):
        Tenant.objects.filter(pk=self.default.pk).update(is_default=False)
        request = self.factory.get('/api/v1/health/', HTTP_HOST='localhost')
        response = self.middleware(request)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.seen, [(None, None)])

    def test_tenant_cleared_when_view_raises(self):
        def broken(request):
            raise RuntimeError('boom')

        request = self.factory.get('/api/v1/clients/', HTTP_HOST='acme.localhost')
        with self.assertRaises(RuntimeError):
            TenantMiddleware(broken)(request)
        self.assertIsNone(get_current_tenant())
