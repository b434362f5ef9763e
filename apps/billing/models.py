# apps/billing/models.py
"""
Billing ledger models.

Models:
- Invoice: A ledger record (bill) for a vehicle, usually a monthly rental
- InvoiceTax: Pre-computed tax lines on an invoice
- InvoiceCharge: Additional charges and discounts on an invoice
- Payment: Payments received against an invoice (append-only)
- Reminder: Payment reminders sent for an invoice (append-only)

The financial totals on Invoice (tax_amount, discount_amount, total_amount,
paid_amount, balance_amount, payment_status and the payment-driven part of
status) are derived fields. They are never edited directly; every writer
calls apps.billing.calculator.recalculate() before saving.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords

from shared.models import TenantMixin, TimestampMixin, AuditMixin


class Invoice(TenantMixin, TimestampMixin, AuditMixin):
    """
    Ledger record for a vehicle.

    Monthly rental invoices are keyed by (vehicle, transaction_type,
    billing_period); the database enforces one row per key and tenant, which
    is what makes recurring generation idempotent.

    Example:
        Invoice: INV-202402-0003
        Vehicle: Audi 2024 (WAUZZZ8V0KA012345)
        Billing period: 2024-02, due 2024-02-15
        Total: 12,000.00   Paid: 5,000.00   Status: Partially Paid
    """
    TYPE_SALE = 'Sale'
    TYPE_PURCHASE = 'Purchase'
    TYPE_SERVICE = 'Service'
    TYPE_RENTAL = 'Rental'
    TYPE_INSURANCE = 'Insurance'
    TYPE_OTHER = 'Other'

    TRANSACTION_TYPE_CHOICES = [
        (TYPE_SALE, 'Sale'),
        (TYPE_PURCHASE, 'Purchase'),
        (TYPE_SERVICE, 'Service'),
        (TYPE_RENTAL, 'Rental'),
        (TYPE_INSURANCE, 'Insurance'),
        (TYPE_OTHER, 'Other'),
    ]

    STATUS_DRAFT = 'Draft'
    STATUS_SENT = 'Sent'
    STATUS_PAID = 'Paid'
    STATUS_PARTIALLY_PAID = 'Partially Paid'
    STATUS_OVERDUE = 'Overdue'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_REFUNDED = 'Refunded'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_SENT, 'Sent'),
        (STATUS_PAID, 'Paid'),
        (STATUS_PARTIALLY_PAID, 'Partially Paid'),
        (STATUS_OVERDUE, 'Overdue'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_REFUNDED, 'Refunded'),
    ]

    PAYMENT_PENDING = 'Pending'
    PAYMENT_PARTIAL = 'Partial'
    PAYMENT_PAID = 'Paid'
    PAYMENT_OVERDUE = 'Overdue'

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_PARTIAL, 'Partial'),
        (PAYMENT_PAID, 'Paid'),
        (PAYMENT_OVERDUE, 'Overdue'),
    ]

    # Identity
    invoice_number = models.CharField(
        max_length=30,
        help_text="INV-YYYYMM-NNNN, unique per tenant, assigned once at creation"
    )
    invoice_date = models.DateField(
        default=timezone.localdate,
        help_text="Date invoice was created"
    )
    due_date = models.DateField(
        help_text="Payment due date (billing period + anchor day)"
    )

    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        related_name='invoices',
        help_text="Client being billed (vehicle owner at creation)"
    )
    vehicle = models.ForeignKey(
        'vehicles.Vehicle',
        on_delete=models.PROTECT,
        related_name='invoices',
        help_text="Vehicle this invoice is for"
    )
    transaction_type = models.CharField(
        max_length=20,
        choices=TRANSACTION_TYPE_CHOICES,
        default=TYPE_RENTAL,
    )

    # Recurrence
    billing_period = models.CharField(
        max_length=7,
        help_text="Calendar month covered, 'YYYY-MM'"
    )
    cycle_anchor_day = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(28)],
        help_text="Due day of month, snapshotted from the vehicle at creation"
    )

    # Snapshot of the vehicle's monthly fee
    base_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Recurring fee at creation time"
    )

    # Derived (see calculator.recalculate)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    balance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_PENDING,
    )
    sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the invoice was sent to the client"
    )

    terms = models.TextField(blank=True, max_length=1000)
    notes = models.TextField(blank=True, max_length=1000)

    history = HistoricalRecords()

    class Meta:
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'invoice_number'],
                name='uniq_invoice_number_per_tenant',
            ),
            models.UniqueConstraint(
                fields=['tenant', 'vehicle', 'transaction_type', 'billing_period'],
                name='uniq_invoice_per_vehicle_period',
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'billing_period', 'due_date'], name='billing_inv_period_due_idx'),
            models.Index(fields=['tenant', 'client', 'status'], name='billing_inv_client_status_idx'),
            models.Index(fields=['tenant', 'payment_status', 'due_date'], name='billing_inv_paystat_due_idx'),
            models.Index(fields=['tenant', 'invoice_date'], name='billing_inv_date_idx'),
        ]

    def __str__(self):
        return self.invoice_number

    @property
    def is_closed(self):
        """Cancelled and refunded invoices no longer accept changes."""
        return self.status in (self.STATUS_CANCELLED, self.STATUS_REFUNDED)

    @property
    def days_overdue(self):
        if self.payment_status == self.PAYMENT_PAID or self.status == self.STATUS_PAID:
            return 0
        today = timezone.localdate()
        if self.due_date and today > self.due_date:
            return (today - self.due_date).days
        return 0

    @property
    def is_overdue(self):
        """Unpaid on or after the due date."""
        if self.payment_status == self.PAYMENT_PAID or self.status == self.STATUS_PAID or not self.due_date:
            return False
        return timezone.localdate() >= self.due_date

    @property
    def payment_percentage(self):
        from .calculator import payment_percentage
        return payment_percentage(self.total_amount, self.paid_amount)


class InvoiceTax(TenantMixin):
    """
    A tax line. The amount is computed by the caller; rate is for display.
    """
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='taxes',
    )
    name = models.CharField(max_length=100)
    rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Percent, display only"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.rate}%)"


class InvoiceCharge(TenantMixin):
    """
    Additional charge or discount.

    Discounts may be stored positive or negative; the calculator always
    subtracts their absolute value.
    """
    CHARGE = 'Charge'
    DISCOUNT = 'Discount'

    CHARGE_TYPE_CHOICES = [
        (CHARGE, 'Charge'),
        (DISCOUNT, 'Discount'),
    ]

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='charges',
    )
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    charge_type = models.CharField(
        max_length=10,
        choices=CHARGE_TYPE_CHOICES,
        default=CHARGE,
    )

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.charge_type}: {self.description}"


class Payment(TenantMixin, TimestampMixin):
    """
    Payment received against an invoice.

    Only Cleared payments count toward Invoice.paid_amount.
    """
    METHOD_CHOICES = [
        ('Cash', 'Cash'),
        ('Bank Transfer', 'Bank Transfer'),
        ('Cheque', 'Cheque'),
        ('UPI', 'UPI'),
        ('Credit Card', 'Credit Card'),
        ('Debit Card', 'Debit Card'),
        ('Other', 'Other'),
    ]

    PENDING = 'Pending'
    CLEARED = 'Cleared'
    BOUNCED = 'Bounced'
    CANCELLED = 'Cancelled'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CLEARED, 'Cleared'),
        (BOUNCED, 'Bounced'),
        (CANCELLED, 'Cancelled'),
    ]

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name='payments',
    )
    payment_date = models.DateField(default=timezone.localdate)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    reference_number = models.CharField(
        max_length=100,
        blank=True,
        help_text="Cheque number, transaction ID, etc."
    )
    notes = models.TextField(blank=True, max_length=500)
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='received_payments',
    )
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=CLEARED,
    )

    class Meta:
        ordering = ['payment_date', 'id']

    def __str__(self):
        return f"{self.invoice.invoice_number} {self.amount} ({self.status})"


class Reminder(TenantMixin, TimestampMixin):
    """Payment reminder sent for an invoice. Does not affect totals."""
    TYPE_CHOICES = [
        ('Email', 'Email'),
        ('SMS', 'SMS'),
        ('Phone', 'Phone'),
        ('WhatsApp', 'WhatsApp'),
    ]

    STATUS_CHOICES = [
        ('Sent', 'Sent'),
        ('Delivered', 'Delivered'),
        ('Failed', 'Failed'),
    ]

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='reminders',
    )
    sent_date = models.DateTimeField(default=timezone.now)
    reminder_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Sent')
    sent_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='sent_reminders',
    )

    class Meta:
        ordering = ['sent_date', 'id']

    def __str__(self):
        return f"{self.invoice.invoice_number} {self.reminder_type} reminder"
