# apps/tenants/models.py
"""
Tenant models for multi-tenant SaaS architecture.

Models:
- Tenant: Represents a single dealership / fleet operator
- TenantSettings: Configuration and billing defaults for each tenant
"""
from django.db import models


class Tenant(models.Model):
    """
    Represents a single tenant (dealership or fleet operator).

    Each tenant has isolated data - no tenant can see another tenant's
    clients, vehicles or invoices.
    """
    name = models.CharField(max_length=255, help_text="Company name")
    subdomain = models.CharField(
        max_length=63,
        unique=True,
        help_text="Subdomain for accessing the system (e.g., 'acme' for acme.autoledger.app)"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot log in"
    )
    is_default = models.BooleanField(
        default=False,
        help_text="Default tenant for development (only one should be default)"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['subdomain'], name='tenants_ten_subdoma_6f1f3c_idx'),
            models.Index(fields=['is_active'], name='tenants_ten_is_acti_0b8b4e_idx'),
        ]

    def __str__(self):
        return self.name


class TenantSettings(models.Model):
    """
    Configuration and billing defaults for each tenant.

    Created automatically when a Tenant is created (via signals).
    """
    tenant = models.OneToOneField(
        Tenant,
        on_delete=models.CASCADE,
        related_name='settings'
    )

    company_name = models.CharField(
        max_length=255,
        blank=True,
        help_text="Full legal company name"
    )

    # Localization
    timezone = models.CharField(
        max_length=50,
        default='UTC',
        help_text="Default timezone for the tenant"
    )
    currency = models.CharField(
        max_length=3,
        default='USD',
        help_text="Currency code (ISO 4217)"
    )

    # Billing defaults
    invoice_terms = models.TextField(
        blank=True,
        max_length=1000,
        help_text="Terms printed on every new monthly rental invoice"
    )

    # Contact
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "tenant settings"

    def __str__(self):
        return f"Settings for {self.tenant.name}"
