# apps/api/v1/serializers/vehicles.py
"""
Serializers for Vehicle model.
"""
from rest_framework import serializers

from apps.vehicles.models import Vehicle
from .base import TenantModelSerializer, AuditFieldsMixin


class VehicleSerializer(AuditFieldsMixin, TenantModelSerializer):
    """Serializer for Vehicle model."""
    owner_name = serializers.CharField(source='owner.name', read_only=True, allow_null=True)
    is_billable = serializers.BooleanField(read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'chassis_number', 'engine_number', 'brand', 'year', 'color', 'mileage',
            'owner', 'owner_name', 'status', 'market_value', 'purchase_date',
            'is_active', 'show_in_marketplace',
            'monthly_fee', 'billing_anchor_day', 'is_billable',
            'created_by_name', 'updated_by_name', 'created_at', 'updated_at',
        ]

    def validate_chassis_number(self, value):
        value = value.strip().upper()
        request = self.context.get('request')
        tenant = getattr(request, 'tenant', None) if request else None
        if tenant is None:
            return value
        qs = Vehicle.objects.all_tenants().filter(tenant=tenant, chassis_number=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A vehicle with this chassis number already exists.")
        return value
