# apps/vehicles/models.py
"""
Vehicle inventory.

A Vehicle held for an owner (Client) may carry a recurring monthly fee.
The billing engine reads it to create one rental invoice per month; see
apps.billing.services.BillingService.ensure_monthly_invoice.
"""
from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from django.utils import timezone

from shared.models import TenantMixin, TimestampMixin, AuditMixin

# 17 characters, VIN alphabet (no I, O, Q)
chassis_validator = RegexValidator(
    regex=r'^[A-HJ-NPR-Z0-9]{17}$',
    message="Please enter a valid 17-character chassis number"
)


class Vehicle(TenantMixin, TimestampMixin, AuditMixin):
    """
    A vehicle in a tenant's inventory.

    Billing-relevant fields:
    - is_active / status: only active, unsold vehicles are billed
    - owner: the Client billed for the vehicle
    - monthly_fee: recurring fee, snapshotted onto each invoice
    - purchase_date / billing_anchor_day: decide the due day of the month
    """
    STATUS_AVAILABLE = 'Available'
    STATUS_RESERVED = 'Reserved'
    STATUS_SOLD = 'Sold'

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_RESERVED, 'Reserved'),
        (STATUS_SOLD, 'Sold'),
    ]

    chassis_number = models.CharField(
        max_length=17,
        validators=[chassis_validator],
        help_text="17-character chassis (VIN) number, unique per tenant"
    )
    engine_number = models.CharField(
        max_length=50,
        help_text="Engine number"
    )
    brand = models.CharField(max_length=50)
    year = models.PositiveIntegerField(
        validators=[MinValueValidator(1900)],
        help_text="Manufacturing year"
    )
    color = models.CharField(max_length=30)
    mileage = models.PositiveIntegerField(default=0)

    owner = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='vehicles',
        help_text="Client who owns the vehicle (billed monthly)"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE,
    )
    market_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(Decimal('0'))],
    )

    purchase_date = models.DateField(
        default=timezone.localdate,
        null=True,
        blank=True,
        help_text="Purchase date; its day of month is the default billing anchor"
    )
    is_active = models.BooleanField(default=True)
    show_in_marketplace = models.BooleanField(default=False)

    monthly_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Recurring monthly rental fee (0 = not billed)"
    )
    billing_anchor_day = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(28)],
        help_text="Override for the invoice due day (1-28); defaults to the purchase day"
    )

    class Meta:
        unique_together = [('tenant', 'chassis_number')]
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='vehicles_ve_tenant__51c0d2_idx'),
            models.Index(fields=['tenant', 'brand'], name='vehicles_ve_tenant__9e4a17_idx'),
            models.Index(fields=['tenant', 'owner'], name='vehicles_ve_tenant__c2f5b8_idx'),
        ]

    def __str__(self):
        return f"{self.brand} {self.year} ({self.chassis_number})"

    @property
    def is_billable(self):
        """True if the vehicle passes every monthly billing eligibility check."""
        return (
            self.is_active
            and self.status != self.STATUS_SOLD
            and self.owner_id is not None
            and self.monthly_fee is not None
            and self.monthly_fee > 0
        )

    @property
    def age(self):
        return timezone.now().year - self.year

    def save(self, *args, **kwargs):
        if self.chassis_number:
            self.chassis_number = self.chassis_number.strip().upper()
        if self.engine_number:
            self.engine_number = self.engine_number.strip().upper()
        super().save(*args, **kwargs)
