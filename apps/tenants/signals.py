# apps/tenants/signals.py
"""
Signals for automatic tenant setup.

When a Tenant is created, its TenantSettings row is created with it.
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Tenant, TenantSettings


@receiver(post_save, sender=Tenant)
def create_tenant_settings(sender, instance, created, **kwargs):
    """
    Automatically create TenantSettings when a Tenant is created.
    """
    if created:
        TenantSettings.objects.create(
            tenant=instance,
            company_name=instance.name
        )
