# apps/billing/tests/base.py
"""
Shared fixtures for billing tests.
"""
from datetime import date
from decimal import Decimal
from itertools import count

from django.test import TestCase

from apps.billing.models import Invoice
from apps.clients.models import Client
from apps.tenants.models import Tenant
from apps.vehicles.models import Vehicle
from shared.managers import set_current_tenant
from users.models import User

_vin_counter = count(1)


def make_vehicle(tenant, owner=None, **kwargs):
    """Billable vehicle with a unique chassis number."""
    serial = next(_vin_counter)
    defaults = {
        'chassis_number': f'WAUZZZ8V0KA{serial:06d}',
        'engine_number': f'ENG{serial:05d}',
        'brand': 'Audi',
        'year': 2022,
        'color': 'Black',
        'owner': owner,
        'monthly_fee': Decimal('12000.00'),
        'purchase_date': date(2023, 5, 15),
    }
    defaults.update(kwargs)
    return Vehicle.objects.create(tenant=tenant, **defaults)


def make_invoice(tenant, vehicle, invoice_number, billing_period='2099-01', **kwargs):
    """Insert an invoice row directly, bypassing BillingService."""
    defaults = {
        'invoice_date': date(2099, 1, 1),
        'due_date': date(2099, 1, 15),
        'client': vehicle.owner,
        'base_amount': Decimal('100.00'),
        'total_amount': Decimal('100.00'),
        'balance_amount': Decimal('100.00'),
    }
    defaults.update(kwargs)
    return Invoice.objects.create(
        tenant=tenant,
        vehicle=vehicle,
        invoice_number=invoice_number,
        billing_period=billing_period,
        **defaults,
    )


class BillingTestCase(TestCase):
    """Base test case: one tenant with an owner, plus a second tenant."""

    @classmethod
    def setUpTestData(cls):
        cls.tenant = Tenant.objects.create(name='Elite Motors', subdomain='test-billing')
        cls.other_tenant = Tenant.objects.create(name='Rival Motors', subdomain='test-billing-rival')
        cls.user = User.objects.create_user(username='biller', password='pass', tenant=cls.tenant)
        cls.owner = Client.objects.create(
            tenant=cls.tenant, name='Asha Rao', phone='+91 98450 00001',
        )
        cls.other_owner = Client.objects.create(
            tenant=cls.other_tenant, name='Ravi Kumar', phone='+91 98450 00002',
        )

    def setUp(self):
        set_current_tenant(self.tenant)

    def tearDown(self):
        set_current_tenant(None)
