# apps/billing/tests/test_calculator.py
"""
Tests for the derived-field calculator.
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from apps.billing.calculator import compute_derived_fields, payment_percentage, recalculate
from apps.billing.models import Invoice

DUE = date(2024, 2, 15)
BEFORE_DUE = date(2024, 2, 10)
AFTER_DUE = date(2024, 2, 16)


def tax(amount):
    return SimpleNamespace(amount=Decimal(amount))


def charge(amount, charge_type='Charge'):
    return SimpleNamespace(amount=Decimal(amount), charge_type=charge_type)


def payment(amount, status='Cleared'):
    return SimpleNamespace(amount=Decimal(amount), status=status)


class TotalsTest(SimpleTestCase):

    def test_base_only(self):
        d = compute_derived_fields(Decimal('12000'), due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.total_amount, Decimal('12000.00'))
        self.assertEqual(d.balance_amount, Decimal('12000.00'))
        self.assertEqual(d.paid_amount, Decimal('0.00'))
        self.assertEqual(d.payment_status, 'Pending')
        self.assertEqual(d.status, 'Draft')

    def test_taxes_charges_and_discounts(self):
        d = compute_derived_fields(
            Decimal('1000'),
            taxes=[tax('90'), tax('90')],
            charges=[charge('50'), charge('30', 'Discount'), charge('-20', 'Discount')],
            due_date=DUE,
            today=BEFORE_DUE,
        )
        self.assertEqual(d.tax_amount, Decimal('180.00'))
        self.assertEqual(d.discount_amount, Decimal('50.00'))
        self.assertEqual(d.total_amount, Decimal('1180.00'))

    def test_only_cleared_payments_count(self):
        d = compute_derived_fields(
            Decimal('1000'),
            payments=[payment('300'), payment('500', 'Pending'), payment('200', 'Bounced')],
            due_date=DUE,
            today=BEFORE_DUE,
        )
        self.assertEqual(d.paid_amount, Decimal('300.00'))
        self.assertEqual(d.balance_amount, Decimal('700.00'))

    def test_float_inputs_are_quantized(self):
        d = compute_derived_fields(10.1, taxes=[SimpleNamespace(amount=0.2)], due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.total_amount, Decimal('10.30'))

    def test_total_identity(self):
        d = compute_derived_fields(
            Decimal('999.99'),
            taxes=[tax('12.34')],
            charges=[charge('5.55'), charge('1.11', 'Discount')],
            payments=[payment('100')],
            due_date=DUE,
            today=BEFORE_DUE,
        )
        self.assertEqual(d.total_amount, Decimal('999.99') + d.tax_amount + Decimal('5.55') - d.discount_amount)
        self.assertEqual(d.balance_amount, d.total_amount - d.paid_amount)


class PaymentStatusTest(SimpleTestCase):

    def test_partial(self):
        d = compute_derived_fields(Decimal('1000'), payments=[payment('400')], due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.payment_status, 'Partial')
        self.assertEqual(d.status, 'Partially Paid')

    def test_paid_in_full(self):
        d = compute_derived_fields(Decimal('1000'), payments=[payment('1000')], due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.payment_status, 'Paid')
        self.assertEqual(d.status, 'Paid')
        self.assertEqual(d.balance_amount, Decimal('0.00'))

    def test_overpayment_leaves_negative_balance(self):
        d = compute_derived_fields(Decimal('1000'), payments=[payment('1200')], due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.payment_status, 'Paid')
        self.assertEqual(d.balance_amount, Decimal('-200.00'))

    def test_overdue_after_due_date(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, today=AFTER_DUE)
        self.assertEqual(d.payment_status, 'Overdue')
        self.assertEqual(d.status, 'Overdue')

    def test_partial_becomes_overdue(self):
        d = compute_derived_fields(Decimal('1000'), payments=[payment('400')], due_date=DUE, today=AFTER_DUE)
        self.assertEqual(d.payment_status, 'Overdue')

    def test_overdue_on_due_date(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, today=DUE)
        self.assertEqual(d.payment_status, 'Overdue')
        self.assertEqual(d.status, 'Overdue')

    def test_not_overdue_before_due_date(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, today=BEFORE_DUE)
        self.assertEqual(d.payment_status, 'Pending')

    def test_paid_never_overdue(self):
        d = compute_derived_fields(Decimal('1000'), payments=[payment('1000')], due_date=DUE, today=AFTER_DUE)
        self.assertEqual(d.payment_status, 'Paid')

    def test_datetime_today_accepted(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, today=datetime(2024, 2, 14, 23, 0))
        self.assertEqual(d.payment_status, 'Pending')


class StatusSyncTest(SimpleTestCase):

    def test_terminal_status_kept(self):
        for status in ['Cancelled', 'Refunded']:
            with self.subTest(status=status):
                d = compute_derived_fields(
                    Decimal('1000'), payments=[payment('1000')], due_date=DUE, status=status, today=BEFORE_DUE,
                )
                self.assertEqual(d.status, status)
                self.assertEqual(d.payment_status, 'Paid')

    def test_sent_kept_while_pending(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, status='Sent', sent=True, today=BEFORE_DUE)
        self.assertEqual(d.status, 'Sent')

    def test_derived_status_reverts_to_draft(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, status='Paid', today=BEFORE_DUE)
        self.assertEqual(d.status, 'Draft')

    def test_derived_status_reverts_to_sent(self):
        d = compute_derived_fields(Decimal('1000'), due_date=DUE, status='Overdue', sent=True, today=BEFORE_DUE)
        self.assertEqual(d.status, 'Sent')


class PaymentPercentageTest(SimpleTestCase):

    def test_zero_total(self):
        self.assertEqual(payment_percentage(Decimal('0'), Decimal('0')), 0)

    def test_rounds_to_whole_percent(self):
        self.assertEqual(payment_percentage(Decimal('300'), Decimal('100')), 33)
        self.assertEqual(payment_percentage(Decimal('300'), Decimal('200')), 67)
        self.assertEqual(payment_percentage(Decimal('1000'), Decimal('1000')), 100)


class RecalculateTest(SimpleTestCase):

    def test_unsaved_invoice(self):
        invoice = Invoice(base_amount=Decimal('500'), due_date=DUE, status='Paid')
        derived = recalculate(invoice, today=BEFORE_DUE)
        self.assertEqual(invoice.total_amount, Decimal('500.00'))
        self.assertEqual(invoice.balance_amount, Decimal('500.00'))
        self.assertEqual(invoice.payment_status, 'Pending')
        self.assertEqual(invoice.status, 'Draft')
        self.assertEqual(derived.total_amount, invoice.total_amount)
        self.assertIsNone(invoice.pk)
