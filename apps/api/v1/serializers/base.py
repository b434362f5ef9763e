# apps/api/v1/serializers/base.py
"""
Base serializers with automatic tenant handling.

All tenant-scoped serializers should inherit from TenantModelSerializer
to ensure proper tenant assignment on create/update.
"""
from rest_framework import serializers


class TenantSerializerMixin:
    """
    Mixin that automatically handles tenant field on create/update.

    - Makes 'tenant' read-only (set from the request)
    - Validates that related objects belong to the current tenant
    - Auto-assigns tenant on create
    """

    def get_fields(self):
        fields = super().get_fields()
        if 'tenant' in fields:
            fields['tenant'].read_only = True
        return fields

    def create(self, validated_data):
        """Auto-assign tenant from request context."""
        request = self.context.get('request')
        if request and getattr(request, 'tenant', None):
            validated_data['tenant'] = request.tenant
        return super().create(validated_data)

    def validate(self, attrs):
        """Validate foreign key references belong to the same tenant."""
        request = self.context.get('request')
        tenant = getattr(request, 'tenant', None) if request else None
        if tenant is None:
            return super().validate(attrs)

        for field_name, value in attrs.items():
            if value is not None and hasattr(value, 'tenant_id') and value.tenant_id != tenant.pk:
                raise serializers.ValidationError({
                    field_name: f"This {field_name} does not belong to your organization."
                })

        return super().validate(attrs)


class TenantModelSerializer(TenantSerializerMixin, serializers.ModelSerializer):
    """
    Base ModelSerializer with automatic tenant handling.

    Usage:
        class ClientSerializer(TenantModelSerializer):
            class Meta:
                model = Client
                fields = ['id', 'name', 'phone']
    """
    pass


class AuditFieldsMixin(serializers.Serializer):
    """Read-only audit fields (who and when)."""
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, allow_null=True)
    updated_by_name = serializers.CharField(source='updated_by.username', read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
