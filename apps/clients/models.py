# apps/clients/models.py
"""
Client model: the people and companies that own (and are billed for)
vehicles held in inventory.
"""
from django.core.validators import RegexValidator
from django.db import models

from shared.models import TenantMixin, TimestampMixin, AuditMixin

phone_validator = RegexValidator(
    regex=r'^[+]?[\d\s\-()]+$',
    message="Please enter a valid phone number"
)


class Client(TenantMixin, TimestampMixin, AuditMixin):
    """
    A vehicle owner.

    Clients are referenced by Vehicle.owner; monthly rental invoices are
    billed to the owner at the time the invoice is created.
    """
    CLIENT_TYPES = [
        ('Individual', 'Individual'),
        ('Dealer', 'Dealer'),
        ('Company', 'Company'),
    ]

    name = models.CharField(
        max_length=100,
        help_text="Client display name"
    )
    phone = models.CharField(
        max_length=30,
        validators=[phone_validator],
        help_text="Contact phone number (unique per tenant)"
    )
    client_type = models.CharField(
        max_length=20,
        choices=CLIENT_TYPES,
        help_text="Kind of client"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive clients are hidden from selections"
    )

    class Meta:
        unique_together = [('tenant', 'phone')]
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant', 'name'], name='clients_cli_tenant__3c9e1a_idx'),
            models.Index(fields=['tenant', 'client_type'], name='clients_cli_tenant__7d2b44_idx'),
            models.Index(fields=['tenant', 'is_active'], name='clients_cli_tenant__a81f06_idx'),
        ]

    def __str__(self):
        return self.name
