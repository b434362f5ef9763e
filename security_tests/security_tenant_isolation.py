"""
Security tests for tenant data isolation.

This test suite verifies that one tenant cannot read or change another
tenant's clients, vehicles or invoices, whether through the ORM, the
billing service or the REST API.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import TransactionTestCase
from rest_framework.test import APIClient

from apps.billing.exceptions import VehicleNotFound
from apps.billing.models import Invoice, Payment
from apps.billing.services import BillingService
from apps.clients.models import Client
from apps.tenants.models import Tenant
from apps.vehicles.models import Vehicle
from shared.models import TenantContext

User = get_user_model()

PERIOD = '2099-06'


@pytest.mark.security
@pytest.mark.tenant_isolation
class TenantIsolationSecurityTests(TransactionTestCase):
    """
    Simulates a tenant trying to reach another tenant's data.
    """

    def setUp(self):
        """Create two separate tenants, each with an owner, vehicle and invoice."""
        self.tenant1 = Tenant.objects.create(name="Tenant One Motors", subdomain="tenant1", is_default=True)
        self.tenant2 = Tenant.objects.create(name="Tenant Two Motors", subdomain="tenant2")

        self.user1 = User.objects.create_user(username='user1', password='x', tenant=self.tenant1)
        self.user2 = User.objects.create_user(username='user2', password='x', tenant=self.tenant2)

        self.client1, self.vehicle1, self.invoice1 = self._seed(self.tenant1, self.user1, '1')
        self.client2, self.vehicle2, self.invoice2 = self._seed(self.tenant2, self.user2, '2')

    def _seed(self, tenant, user, suffix):
        client = Client.objects.create(tenant=tenant, name=f"Owner {suffix}", phone=f"+91 9000000{suffix}")
        vehicle = Vehicle.objects.create(
            tenant=tenant, chassis_number=f"WAUZZZ8V0KA30000{suffix}", engine_number=f"E{suffix}",
            brand='Audi', year=2022, color='Black', owner=client, monthly_fee=Decimal('1000.00'),
            purchase_date=date(2023, 1, 10),
        )
        invoice = BillingService(tenant, user).ensure_monthly_invoice(vehicle.pk, PERIOD).invoice
        return client, vehicle, invoice

    def test_client_isolation_query(self):
        with TenantContext(self.tenant1):
            clients = Client.objects.all()
            self.assertEqual(clients.count(), 1)
            self.assertEqual(clients.first().id, self.client1.id)
            with self.assertRaises(Client.DoesNotExist):
                Client.objects.get(id=self.client2.id)

    def test_vehicle_isolation_query(self):
        with TenantContext(self.tenant1):
            self.assertEqual(list(Vehicle.objects.values_list('id', flat=True)), [self.vehicle1.id])
            with self.assertRaises(Vehicle.DoesNotExist):
                Vehicle.objects.get(chassis_number=self.vehicle2.chassis_number)

    def test_invoice_isolation_query(self):
        with TenantContext(self.tenant1):
            self.assertEqual(list(Invoice.objects.values_list('id', flat=True)), [self.invoice1.id])
            with self.assertRaises(Invoice.DoesNotExist):
                Invoice.objects.get(id=self.invoice2.id)

    def test_invoice_numbers_are_per_tenant(self):
        self.assertEqual(self.invoice1.invoice_number, self.invoice2.invoice_number)

    def test_no_tenant_context_returns_nothing(self):
        self.assertEqual(Invoice.objects.count(), 0)
        self.assertEqual(Invoice.objects.all_tenants().count(), 2)

    def test_service_cannot_bill_other_tenants_vehicle(self):
        with self.assertRaises(VehicleNotFound):
            BillingService(self.tenant1, self.user1).ensure_monthly_invoice(self.vehicle2.pk, '2099-07')
        self.assertFalse(Invoice.objects.all_tenants().filter(billing_period='2099-07').exists())

    def test_service_listing_is_scoped(self):
        invoices = BillingService(self.tenant1, self.user1).list_monthly(PERIOD)
        self.assertEqual([i.id for i in invoices], [self.invoice1.id])

    def test_service_cannot_pay_other_tenants_invoice(self):
        with self.assertRaises(Invoice.DoesNotExist):
            BillingService(self.tenant1, self.user1).add_payment(self.invoice2, Decimal('10'), 'Cash')
        self.assertFalse(Payment.objects.all_tenants().exists())

    def test_batch_generation_is_scoped(self):
        summary = BillingService(self.tenant1, self.user1).generate_monthly_invoices('2099-08')
        self.assertEqual(summary.created, 1)
        self.assertFalse(
            Invoice.objects.all_tenants().filter(tenant=self.tenant2, billing_period='2099-08').exists()
        )

    def test_api_detail_of_other_tenants_invoice(self):
        api = APIClient()
        api.force_authenticate(user=self.user1)
        response = api.get(f'/api/v1/billing/{self.invoice2.id}/')
        self.assertEqual(response.status_code, 404)

    def test_api_ensure_other_tenants_vehicle(self):
        api = APIClient()
        api.force_authenticate(user=self.user1)
        response = api.post(f'/api/v1/billing/ensure/vehicle/{self.vehicle2.id}/?month=2099-09')
        self.assertEqual(response.status_code, 404)

    def test_api_header_cannot_switch_tenant(self):
        api = APIClient()
        api.force_authenticate(user=self.user1)
        response = api.get('/api/v1/billing/list/', {'month': PERIOD}, HTTP_X_TENANT_ID=str(self.tenant2.id))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([b['id'] for b in response.data['data']['bills']], [self.invoice1.id])

    def test_api_user_of_other_tenant_forbidden(self):
        api = APIClient()
        api.force_authenticate(user=self.user2)
        response = api.get('/api/v1/billing/')
        self.assertEqual(response.status_code, 403)

    def test_api_cross_tenant_owner_rejected(self):
        api = APIClient()
        api.force_authenticate(user=self.user1)
        response = api.patch(f'/api/v1/vehicles/{self.vehicle1.id}/', {'owner': self.client2.id}, format='json')
        self.assertEqual(response.status_code, 400)
        self.vehicle1.refresh_from_db()
        self.assertEqual(self.vehicle1.owner_id, self.client1.id)
