# shared/models.py
"""
Abstract base models for the entire application.

TenantMixin: Adds automatic tenant scoping to any model
TimestampMixin: Adds created_at and updated_at timestamps
AuditMixin: Adds created_by / updated_by user stamps
TenantContext: Context manager for setting tenant in tests/scripts
"""
from django.conf import settings
from django.db import models

from .managers import TenantManager, set_current_tenant, get_current_tenant


class TenantContext:
    """
    Context manager for temporarily setting the current tenant.

    Useful for tests and management commands that need to operate
    within a specific tenant's context.

    Example:
        with TenantContext(tenant):
            vehicles = Vehicle.objects.filter(is_active=True)
    """
    def __init__(self, tenant):
        self.tenant = tenant
        self.previous_tenant = None

    def __enter__(self):
        self.previous_tenant = get_current_tenant()
        set_current_tenant(self.tenant)
        return self.tenant

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_current_tenant(self.previous_tenant)
        return False


class TenantMixin(models.Model):
    """
    Abstract base model for tenant-scoped models.

    Uses TenantManager so all queries are filtered by the current tenant.
    Clients, vehicles, invoices and every invoice child row inherit from it.
    """
    tenant = models.ForeignKey(
        'tenants.Tenant',
        on_delete=models.CASCADE,
        related_name='%(class)s_set'
    )

    objects = TenantManager()

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    """
    Abstract base model that adds timestamp tracking.

    - created_at: Set once when record is created
    - updated_at: Updated every time record is saved
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AuditMixin(models.Model):
    """
    Abstract base model recording which user created and last updated a row.

    The acting user is supplied by the caller (request.user or the user a
    scheduled job runs as); it is never validated here.
    """
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        help_text="User who created this record"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True
