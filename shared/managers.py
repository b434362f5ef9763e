# shared/managers.py
"""
Tenant-scoped manager with automatic query filtering.

The current tenant lives in thread-local storage and is set per request by
TenantMiddleware (or by TenantContext in scripts and tests). Every query made
through TenantManager is filtered to that tenant.
"""
import threading

from django.db import models

_thread_locals = threading.local()


def set_current_tenant(tenant):
    """Set the current tenant in thread-local storage."""
    _thread_locals.tenant = tenant


def get_current_tenant():
    """Get the current tenant from thread-local storage."""
    return getattr(_thread_locals, 'tenant', None)


class TenantManager(models.Manager):
    """
    Manager that filters every query by the current tenant.

    With no tenant set the queryset is empty, so a missing middleware or a
    forgotten TenantContext never leaks another tenant's vehicles or invoices.

    Usage:
        Vehicle.objects.all()               # current tenant's vehicles only
        Vehicle.objects.filter(brand='Audi')

    Services that already hold a tenant explicitly use
    ``all_tenants().filter(tenant=tenant)`` so they do not depend on
    thread-local state (management commands, batch jobs).
    """

    def get_queryset(self):
        tenant = get_current_tenant()
        qs = super().get_queryset()

        if tenant:
            return qs.filter(tenant=tenant)

        return qs.none()

    def all_tenants(self):
        """
        Bypass tenant scoping.

        Callers must add their own tenant filter unless they genuinely
        need every tenant's rows (admin, data migrations).
        """
        return super().get_queryset()
