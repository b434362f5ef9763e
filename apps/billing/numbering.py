# apps/billing/numbering.py
"""
Invoice number allocation.

Numbers look like INV-202402-0007: the creation year and month, then a
sequence that restarts at 0001 every month. Sequences are per tenant.

allocate_invoice_number() scans the month's existing numbers for the
highest suffix; it does not reserve anything. Two concurrent creators can
therefore compute the same number. The (tenant, invoice_number) unique
constraint rejects the second insert and BillingService retries with a
freshly allocated number.
"""
from django.utils import timezone

INVOICE_PREFIX = 'INV'
SEQUENCE_WIDTH = 4


def invoice_number_prefix(when):
    """'INV-YYYYMM-' for the month of `when`."""
    return f"{INVOICE_PREFIX}-{when.year:04d}{when.month:02d}-"


def format_invoice_number(when, sequence):
    return f"{invoice_number_prefix(when)}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(invoice_number, prefix):
    """Numeric suffix of `invoice_number`, or None if it is not ours."""
    if not invoice_number.startswith(prefix):
        return None
    suffix = invoice_number[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def allocate_invoice_number(tenant, when=None):
    """
    Next invoice number for the tenant in the month of `when`.

    Suffixes are compared numerically so the sequence keeps counting past
    9999 (INV-202402-10000) instead of sorting as text.

    Args:
        tenant: Tenant instance
        when: date/datetime whose month is used (defaults to now)

    Returns:
        str invoice number, e.g. 'INV-202402-0001'
    """
    from .models import Invoice

    if when is None:
        when = timezone.localdate()

    prefix = invoice_number_prefix(when)
    existing = Invoice.objects.all_tenants().filter(
        tenant=tenant,
        invoice_number__startswith=prefix,
    ).values_list('invoice_number', flat=True)

    highest = 0
    for number in existing:
        sequence = parse_sequence(number, prefix)
        if sequence is not None and sequence > highest:
            highest = sequence

    return format_invoice_number(when, highest + 1)
