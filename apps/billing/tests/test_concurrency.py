# apps/billing/tests/test_concurrency.py
"""
Concurrent creation of monthly invoices.

The lookup/insert race is simulated deterministically on every backend.
The threaded test needs real row-level concurrency and only runs on
PostgreSQL.
"""
import threading
from decimal import Decimal
from unittest import mock, skipUnless

import pytest
from django.db import IntegrityError, connection
from django.test import TransactionTestCase

from apps.billing.exceptions import InvoiceNumberExhausted
from apps.billing.models import Invoice
from apps.billing.services import MAX_NUMBER_ATTEMPTS, BillingService
from apps.clients.models import Client
from apps.tenants.models import Tenant
from users.models import User
from .base import BillingTestCase, make_vehicle

PERIOD = '2099-03'


class SimulatedRaceTest(BillingTestCase):
    """Another caller wins between our lookup and our insert."""

    def setUp(self):
        super().setUp()
        self.vehicle = make_vehicle(self.tenant, self.owner)
        self.svc = BillingService(self.tenant, self.user)

    def test_loser_returns_winners_invoice(self):
        winner = self.svc.ensure_monthly_invoice(self.vehicle.pk, PERIOD).invoice
        original = BillingService._find_rental_invoice
        calls = []

        def stale_first_lookup(service, vehicle, period):
            calls.append(period)
            if len(calls) == 1:
                return None
            return original(service, vehicle, period)

        with mock.patch.object(
            BillingService, '_find_rental_invoice', autospec=True, side_effect=stale_first_lookup,
        ):
            with self.assertLogs('apps.billing.services', level='INFO') as logs:
                result = self.svc.ensure_monthly_invoice(self.vehicle.pk, PERIOD)

        self.assertFalse(result.created)
        self.assertEqual(result.invoice.pk, winner.pk)
        self.assertEqual(result.invoice.invoice_number, winner.invoice_number)
        self.assertEqual(Invoice.objects.filter(vehicle=self.vehicle).count(), 1)
        self.assertTrue(any('Concurrent creation detected' in line for line in logs.output))

    def test_number_collision_retries(self):
        other_vehicle = make_vehicle(self.tenant, self.owner)
        taken = self.svc.ensure_monthly_invoice(other_vehicle.pk, PERIOD).invoice.invoice_number

        from apps.billing import services
        real_allocate = services.allocate_invoice_number
        allocations = iter([taken])

        def collide_once(tenant, when=None):
            return next(allocations, None) or real_allocate(tenant, when)

        with mock.patch.object(services, 'allocate_invoice_number', side_effect=collide_once):
            with self.assertLogs('apps.billing.services', level='WARNING'):
                result = self.svc.ensure_monthly_invoice(self.vehicle.pk, PERIOD)

        self.assertTrue(result.created)
        self.assertNotEqual(result.invoice.invoice_number, taken)
        self.assertEqual(Invoice.objects.filter(billing_period=PERIOD).count(), 2)

    def test_number_collision_gives_up(self):
        other_vehicle = make_vehicle(self.tenant, self.owner)
        taken = self.svc.ensure_monthly_invoice(other_vehicle.pk, PERIOD).invoice.invoice_number

        from apps.billing import services
        with mock.patch.object(services, 'allocate_invoice_number', return_value=taken) as allocate:
            with self.assertRaises(InvoiceNumberExhausted):
                self.svc.ensure_monthly_invoice(self.vehicle.pk, PERIOD)

        self.assertEqual(allocate.call_count, MAX_NUMBER_ATTEMPTS)
        self.assertFalse(Invoice.objects.filter(vehicle=self.vehicle).exists())

    def test_other_integrity_error_propagates(self):
        failure = IntegrityError('NOT NULL constraint failed: billing_invoice.terms')
        with mock.patch.object(
            BillingService, '_insert_rental_invoice', autospec=True, side_effect=failure,
        ) as insert:
            with self.assertRaises(IntegrityError) as ctx:
                self.svc.ensure_monthly_invoice(self.vehicle.pk, PERIOD)

        self.assertIs(ctx.exception, failure)
        self.assertEqual(insert.call_count, 1)
        self.assertFalse(Invoice.objects.filter(vehicle=self.vehicle).exists())


@pytest.mark.concurrency
@skipUnless(connection.vendor == 'postgresql', 'needs row-level concurrency (PostgreSQL)')
class ThreadedEnsureTest(TransactionTestCase):
    """Many threads ensure invoices at once against a real database."""

    THREADS = 8
    # every round of number collisions has one winner, so keep this below
    # MAX_NUMBER_ATTEMPTS
    VEHICLES = 4

    def setUp(self):
        self.tenant = Tenant.objects.create(name='Race Motors', subdomain='test-race')
        self.user = User.objects.create_user(username='racer', password='pass', tenant=self.tenant)
        self.owner = Client.objects.create(tenant=self.tenant, name='Race Owner', phone='+91 90000 00000')

    def _run(self, vehicle_ids):
        barrier = threading.Barrier(len(vehicle_ids))
        results = []
        errors = []
        lock = threading.Lock()

        def worker(vehicle_id):
            try:
                barrier.wait()
                result = BillingService(self.tenant, self.user).ensure_monthly_invoice(vehicle_id, PERIOD)
                with lock:
                    results.append(result)
            except Exception as e:  # collected and asserted below
                with lock:
                    errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=(vid,)) for vid in vehicle_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(errors, [])
        return results

    def test_same_vehicle_creates_one_invoice(self):
        vehicle = make_vehicle(self.tenant, self.owner, monthly_fee=Decimal('500.00'))
        results = self._run([vehicle.pk] * self.THREADS)

        self.assertEqual(sum(1 for r in results if r.created), 1)
        self.assertEqual(len({r.invoice.pk for r in results}), 1)
        self.assertEqual(
            Invoice.objects.all_tenants().filter(vehicle=vehicle, billing_period=PERIOD).count(), 1,
        )

    def test_different_vehicles_get_unique_numbers(self):
        vehicles = [make_vehicle(self.tenant, self.owner) for _ in range(self.VEHICLES)]
        results = self._run([v.pk for v in vehicles])

        self.assertTrue(all(r.created for r in results))
        numbers = list(Invoice.objects.all_tenants().filter(tenant=self.tenant).values_list('invoice_number', flat=True))
        self.assertEqual(len(numbers), self.VEHICLES)
        self.assertEqual(len(set(numbers)), self.VEHICLES)
