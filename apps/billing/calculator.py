# apps/billing/calculator.py
"""
Derived-field calculator for invoices.

compute_derived_fields() is a pure function of an invoice's line items and
payments. recalculate() feeds it from an Invoice instance and assigns the
results; it never saves. Every service method that writes an invoice calls
recalculate() right before save(), so stored totals always match the stored
line items. Readers use the stored fields and never re-add them.

Rules:
    tax_amount      = sum(tax.amount)
    discount_amount = sum(|charge.amount|) over Discount charges
    total_amount    = base + tax_amount + sum(Charge amounts) - discount_amount
    paid_amount     = sum(payment.amount) over Cleared payments
    balance_amount  = total_amount - paid_amount
    payment_status  = Pending (nothing paid) / Paid (paid >= total) / Partial,
                      then Overdue when not Paid and today >= due_date
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

# status values the calculator may set and later take back
DERIVED_STATUSES = ('Paid', 'Partially Paid', 'Overdue')

# status values only explicit operations may leave
TERMINAL_STATUSES = ('Cancelled', 'Refunded')

PAYMENT_TO_STATUS = {
    'Paid': 'Paid',
    'Partial': 'Partially Paid',
    'Overdue': 'Overdue',
}


@dataclass(frozen=True)
class DerivedFields:
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    balance_amount: Decimal
    payment_status: str
    status: str


def _money(value):
    if not isinstance(value, Decimal):
        value = Decimal(str(value or 0))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _today(today):
    if today is None:
        return timezone.localdate()
    return today


def derive_payment_status(total_amount, paid_amount, due_date, today):
    if paid_amount == 0:
        payment_status = 'Pending'
    elif paid_amount >= total_amount:
        payment_status = 'Paid'
    else:
        payment_status = 'Partial'

    if payment_status != 'Paid' and due_date is not None and today >= due_date:
        payment_status = 'Overdue'
    return payment_status


def derive_status(current_status, payment_status, sent=False):
    """
    Keep the document status in step with the payment status.

    Cancelled/Refunded are never overwritten. Pending leaves Draft/Sent
    alone and takes back a previously derived status.
    """
    if current_status in TERMINAL_STATUSES:
        return current_status
    if payment_status in PAYMENT_TO_STATUS:
        return PAYMENT_TO_STATUS[payment_status]
    if current_status in DERIVED_STATUSES:
        return 'Sent' if sent else 'Draft'
    return current_status


def compute_derived_fields(base_amount, taxes=(), charges=(), payments=(),
                           due_date=None, status='Draft', sent=False, today=None):
    """
    Compute every derived invoice field from its inputs.

    Args:
        base_amount: Recurring fee snapshot
        taxes: Iterable of objects with .amount
        charges: Iterable of objects with .amount and .charge_type
        payments: Iterable of objects with .amount and .status
        due_date: date the invoice falls due (None = never overdue)
        status: Current document status
        sent: Whether the invoice has been sent to the client
        today: Override for the current date (tests, batch jobs)

    Returns:
        DerivedFields
    """
    today = _today(today)
    if isinstance(today, datetime):
        today = today.date()

    tax_amount = _money(sum((_money(tax.amount) for tax in taxes), ZERO))

    charges_total = ZERO
    discount_amount = ZERO
    for charge in charges:
        if charge.charge_type == 'Charge':
            charges_total += _money(charge.amount)
        else:
            discount_amount += abs(_money(charge.amount))

    total_amount = _money(base_amount) + tax_amount + charges_total - discount_amount

    paid_amount = _money(sum(
        (_money(payment.amount) for payment in payments if payment.status == 'Cleared'),
        ZERO,
    ))
    balance_amount = total_amount - paid_amount

    payment_status = derive_payment_status(total_amount, paid_amount, due_date, today)

    return DerivedFields(
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total_amount=total_amount,
        paid_amount=paid_amount,
        balance_amount=balance_amount,
        payment_status=payment_status,
        status=derive_status(status, payment_status, sent=sent),
    )


def payment_percentage(total_amount, paid_amount):
    """Whole percent of the total that has been paid; 0 when the total is 0."""
    total = _money(total_amount)
    if total == 0:
        return 0
    percent = (_money(paid_amount) / total * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return int(percent)


def _line_items(invoice):
    """Child rows of a saved invoice, read fresh (never from a prefetch cache)."""
    from .models import InvoiceTax, InvoiceCharge, Payment

    if invoice.pk is None:
        return [], [], []
    taxes = list(InvoiceTax.objects.all_tenants().filter(invoice_id=invoice.pk))
    charges = list(InvoiceCharge.objects.all_tenants().filter(invoice_id=invoice.pk))
    payments = list(Payment.objects.all_tenants().filter(invoice_id=invoice.pk))
    return taxes, charges, payments


def recalculate(invoice, today=None):
    """
    Recompute and assign the invoice's derived fields. Does not save.

    Returns:
        DerivedFields that were applied
    """
    taxes, charges, payments = _line_items(invoice)
    derived = compute_derived_fields(
        base_amount=invoice.base_amount,
        taxes=taxes,
        charges=charges,
        payments=payments,
        due_date=invoice.due_date,
        status=invoice.status,
        sent=invoice.sent_at is not None,
        today=today,
    )
    invoice.tax_amount = derived.tax_amount
    invoice.discount_amount = derived.discount_amount
    invoice.total_amount = derived.total_amount
    invoice.paid_amount = derived.paid_amount
    invoice.balance_amount = derived.balance_amount
    invoice.payment_status = derived.payment_status
    invoice.status = derived.status
    return derived
