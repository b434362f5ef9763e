# apps/billing/tests/test_numbering.py
"""
Tests for invoice number allocation.
"""
from datetime import date

from django.test import SimpleTestCase

from apps.billing.numbering import allocate_invoice_number, format_invoice_number, parse_sequence
from .base import BillingTestCase, make_invoice, make_vehicle

FEB = date(2024, 2, 10)


class FormatTest(SimpleTestCase):

    def test_format(self):
        self.assertEqual(format_invoice_number(FEB, 7), 'INV-202402-0007')
        self.assertEqual(format_invoice_number(FEB, 12345), 'INV-202402-12345')

    def test_parse_sequence(self):
        self.assertEqual(parse_sequence('INV-202402-0042', 'INV-202402-'), 42)
        self.assertIsNone(parse_sequence('INV-202403-0042', 'INV-202402-'))
        self.assertIsNone(parse_sequence('INV-202402-DRAFT', 'INV-202402-'))


class AllocateInvoiceNumberTest(BillingTestCase):

    def setUp(self):
        super().setUp()
        self.vehicle = make_vehicle(self.tenant, self.owner)

    def _existing(self, *numbers):
        for i, number in enumerate(numbers):
            make_invoice(self.tenant, self.vehicle, number, billing_period=f'2099-{i + 1:02d}')

    def test_first_number_of_month(self):
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-0001')

    def test_increments_highest_suffix(self):
        self._existing('INV-202402-0001', 'INV-202402-0005', 'INV-202402-0003')
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-0006')

    def test_numeric_not_lexicographic(self):
        self._existing('INV-202402-9999', 'INV-202402-10000')
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-10001')

    def test_sequence_restarts_each_month(self):
        self._existing('INV-202401-0009')
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-0001')

    def test_sequence_is_per_tenant(self):
        other_vehicle = make_vehicle(self.other_tenant, self.other_owner)
        make_invoice(self.other_tenant, other_vehicle, 'INV-202402-0004')
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-0001')
        self.assertEqual(allocate_invoice_number(self.other_tenant, FEB), 'INV-202402-0005')

    def test_foreign_numbers_ignored(self):
        self._existing('INV-202402-0002', 'INV-202402-ABCD')
        self.assertEqual(allocate_invoice_number(self.tenant, FEB), 'INV-202402-0003')
