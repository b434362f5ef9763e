# apps/billing/periods.py
"""
Billing period helpers.

A billing period is a calendar month written 'YYYY-MM'. Each vehicle has
an anchor day (1-28) on which its monthly invoice falls due; capping at 28
keeps the due date valid in every month, February included.
"""
import re
from datetime import date

from django.core.exceptions import ValidationError
from django.utils import timezone

PERIOD_RE = re.compile(r'^(\d{4})-(\d{2})$')

MIN_ANCHOR_DAY = 1
MAX_ANCHOR_DAY = 28


def parse_period(value):
    """
    Parse a 'YYYY-MM' string.

    Returns:
        (year, month) tuple of ints

    Raises:
        ValidationError(code='invalid_period') for anything else
    """
    match = PERIOD_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise ValidationError(
            f"Invalid billing period '{value}'. Expected YYYY-MM.",
            code='invalid_period',
        )
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(
            f"Invalid billing period '{value}'. Month must be 01-12.",
            code='invalid_period',
        )
    return year, month


def month_key(value):
    """Format a date/datetime as its 'YYYY-MM' billing period."""
    return f"{value.year:04d}-{value.month:02d}"


def current_period():
    """Billing period for today's local date."""
    return month_key(timezone.localdate())


def clamp_anchor_day(day):
    return max(MIN_ANCHOR_DAY, min(int(day), MAX_ANCHOR_DAY))


def compute_anchor_day(vehicle):
    """
    Day of month on which the vehicle's invoices fall due.

    Uses the vehicle's billing_anchor_day override when set, otherwise the
    day of its purchase date, otherwise 1. Always clamped to 1-28.
    """
    if vehicle.billing_anchor_day:
        return clamp_anchor_day(vehicle.billing_anchor_day)
    if vehicle.purchase_date:
        return clamp_anchor_day(vehicle.purchase_date.day)
    return MIN_ANCHOR_DAY


def compute_due_date(period, anchor_day):
    """Calendar date within `period` matching `anchor_day`."""
    year, month = parse_period(period)
    return date(year, month, clamp_anchor_day(anchor_day))
