# apps/tenants/admin.py
"""
Django admin configuration for tenant models.
"""
from django.contrib import admin

from .models import Tenant, TenantSettings


class TenantSettingsInline(admin.StackedInline):
    """Inline editor for TenantSettings."""
    model = TenantSettings
    can_delete = False
    verbose_name_plural = 'Settings'
    fields = [
        'company_name',
        ('timezone', 'currency'),
        'invoice_terms',
        ('phone', 'email'),
    ]


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """Admin interface for Tenant model."""
    list_display = ['name', 'subdomain', 'is_active', 'is_default', 'created_at']
    list_filter = ['is_active', 'is_default', 'created_at']
    search_fields = ['name', 'subdomain']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = [
        (None, {
            'fields': ['name', 'subdomain']
        }),
        ('Status', {
            'fields': ['is_active', 'is_default']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    inlines = [TenantSettingsInline]

    def save_model(self, request, obj, form, change):
        """Ensure only one tenant can be default."""
        if obj.is_default:
            Tenant.objects.filter(is_default=True).exclude(pk=obj.pk).update(is_default=False)
        super().save_model(request, obj, form, change)
