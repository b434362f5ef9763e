# apps/billing/tests/test_commands.py
"""
Tests for the generate_monthly_invoices management command.
"""
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError

from apps.billing.models import Invoice
from apps.tenants.models import Tenant
from shared.managers import get_current_tenant
from .base import BillingTestCase, make_vehicle

PERIOD = '2099-05'


class GenerateMonthlyInvoicesCommandTest(BillingTestCase):

    def setUp(self):
        super().setUp()
        self.vehicle = make_vehicle(self.tenant, self.owner)

    def run_command(self, *args):
        out = StringIO()
        call_command('generate_monthly_invoices', *args, stdout=out)
        return out.getvalue()

    def test_generates_for_named_tenant(self):
        output = self.run_command('--tenant', self.tenant.subdomain, '--period', PERIOD, '--user', 'biller')
        self.assertIn('created 1', output)
        invoice = Invoice.objects.get(vehicle=self.vehicle, billing_period=PERIOD)
        self.assertEqual(invoice.created_by, self.user)

    def test_rerun_counts_existing(self):
        self.run_command('--tenant', self.tenant.subdomain, '--period', PERIOD)
        output = self.run_command('--tenant', self.tenant.subdomain, '--period', PERIOD)
        self.assertIn('created 0, existing 1', output)

    def test_clears_tenant_afterwards(self):
        self.run_command('--tenant', self.tenant.subdomain, '--period', PERIOD)
        self.assertIsNone(get_current_tenant())

    def test_default_tenant_used_without_flag(self):
        Tenant.objects.filter(pk=self.tenant.pk).update(is_default=True)
        output = self.run_command('--period', PERIOD)
        self.assertIn('created 1', output)

    def test_inactive_default_tenant_rejected(self):
        Tenant.objects.filter(pk=self.tenant.pk).update(is_default=True, is_active=False)
        with self.assertRaises(CommandError):
            self.run_command('--period', PERIOD)
        self.assertFalse(Invoice.objects.all_tenants().filter(billing_period=PERIOD).exists())

    def test_inactive_named_tenant_rejected(self):
        Tenant.objects.filter(pk=self.tenant.pk).update(is_active=False)
        with self.assertRaises(CommandError):
            self.run_command('--tenant', self.tenant.subdomain, '--period', PERIOD)

    def test_bad_period(self):
        with self.assertRaises(CommandError):
            self.run_command('--tenant', self.tenant.subdomain, '--period', '2099-13')

    def test_unknown_user(self):
        with self.assertRaises(CommandError):
            self.run_command('--tenant', self.tenant.subdomain, '--user', 'nobody')
