# apps/billing/tests/test_periods.py
"""
Tests for billing period and due date helpers.
"""
from datetime import date, datetime
from types import SimpleNamespace

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from apps.billing.periods import (
    clamp_anchor_day, compute_anchor_day, compute_due_date, month_key, parse_period,
)


def vehicle(billing_anchor_day=None, purchase_date=None):
    return SimpleNamespace(billing_anchor_day=billing_anchor_day, purchase_date=purchase_date)


class ParsePeriodTest(SimpleTestCase):

    def test_valid_period(self):
        self.assertEqual(parse_period('2024-02'), (2024, 2))
        self.assertEqual(parse_period('2024-12'), (2024, 12))

    def test_invalid_periods_rejected(self):
        for value in ['2024-13', '2024-00', '24-02', '2024-2', '2024/02', '2024-02-01', '', None, 202402]:
            with self.subTest(value=value):
                with self.assertRaises(ValidationError) as ctx:
                    parse_period(value)
                self.assertEqual(ctx.exception.code, 'invalid_period')

    def test_month_key(self):
        self.assertEqual(month_key(date(2024, 2, 29)), '2024-02')
        self.assertEqual(month_key(datetime(2024, 11, 3, 23, 59)), '2024-11')


class AnchorDayTest(SimpleTestCase):

    def test_override_wins(self):
        self.assertEqual(compute_anchor_day(vehicle(billing_anchor_day=10, purchase_date=date(2023, 1, 20))), 10)

    def test_purchase_day_used_without_override(self):
        self.assertEqual(compute_anchor_day(vehicle(purchase_date=date(2023, 1, 20))), 20)

    def test_purchase_day_clamped_to_28(self):
        self.assertEqual(compute_anchor_day(vehicle(purchase_date=date(2023, 1, 31))), 28)

    def test_defaults_to_first(self):
        self.assertEqual(compute_anchor_day(vehicle()), 1)

    def test_clamp(self):
        self.assertEqual(clamp_anchor_day(0), 1)
        self.assertEqual(clamp_anchor_day(45), 28)
        self.assertEqual(clamp_anchor_day(7), 7)


class DueDateTest(SimpleTestCase):

    def test_due_date_inside_period(self):
        self.assertEqual(compute_due_date('2024-02', 15), date(2024, 2, 15))

    def test_anchor_31_in_february(self):
        self.assertEqual(compute_due_date('2024-02', 31), date(2024, 2, 28))
        self.assertEqual(compute_due_date('2023-02', 31), date(2023, 2, 28))

    def test_invalid_period(self):
        with self.assertRaises(ValidationError):
            compute_due_date('2024-13', 5)
