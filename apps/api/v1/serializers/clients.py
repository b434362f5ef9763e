# apps/api/v1/serializers/clients.py
"""
Serializers for Client model.
"""
from rest_framework import serializers

from apps.clients.models import Client
from .base import TenantModelSerializer, AuditFieldsMixin


class ClientSerializer(AuditFieldsMixin, TenantModelSerializer):
    """Serializer for Client model."""
    vehicle_count = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            'id', 'name', 'phone', 'client_type', 'is_active', 'vehicle_count',
            'created_by_name', 'updated_by_name', 'created_at', 'updated_at',
        ]

    def get_vehicle_count(self, obj):
        return obj.vehicles.count()

    def validate_phone(self, value):
        request = self.context.get('request')
        tenant = getattr(request, 'tenant', None) if request else None
        if tenant is None:
            return value
        qs = Client.objects.all_tenants().filter(tenant=tenant, phone=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A client with this phone number already exists.")
        return value
