# apps/vehicles/admin.py
from django.contrib import admin

from .models import Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = [
        'chassis_number', 'brand', 'year', 'owner', 'status',
        'is_active', 'monthly_fee', 'billing_anchor_day',
    ]
    list_filter = ['status', 'is_active', 'brand', 'tenant']
    search_fields = ['chassis_number', 'engine_number', 'brand', 'owner__name']
    raw_id_fields = ['owner']
    readonly_fields = ['created_at', 'updated_at', 'created_by', 'updated_by']

    fieldsets = [
        (None, {
            'fields': ['tenant', 'chassis_number', 'engine_number', 'owner', 'status', 'is_active']
        }),
        ('Details', {
            'fields': ['brand', 'year', 'color', 'mileage', 'market_value', 'show_in_marketplace']
        }),
        ('Billing', {
            'fields': ['monthly_fee', 'purchase_date', 'billing_anchor_day']
        }),
        ('Audit', {
            'fields': ['created_at', 'updated_at', 'created_by', 'updated_by'],
            'classes': ['collapse']
        }),
    ]

    def get_queryset(self, request):
        return Vehicle.objects.all_tenants().select_related('tenant', 'owner')
