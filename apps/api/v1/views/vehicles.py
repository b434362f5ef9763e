# apps/api/v1/views/vehicles.py
"""
ViewSet for Vehicle model.
"""
from rest_framework import filters
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.vehicles.models import Vehicle
from apps.api.v1.serializers.vehicles import VehicleSerializer
from .base import TenantModelViewSet


@extend_schema_view(
    list=extend_schema(tags=['vehicles'], summary='List all vehicles'),
    retrieve=extend_schema(tags=['vehicles'], summary='Get vehicle details'),
    create=extend_schema(tags=['vehicles'], summary='Create a new vehicle'),
    update=extend_schema(tags=['vehicles'], summary='Update a vehicle'),
    partial_update=extend_schema(tags=['vehicles'], summary='Partially update a vehicle'),
    destroy=extend_schema(tags=['vehicles'], summary='Delete a vehicle'),
)
class VehicleViewSet(TenantModelViewSet):
    """
    ViewSet for Vehicle model.

    Provides CRUD operations for vehicles in inventory.
    """
    model = Vehicle
    serializer_class = VehicleSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'brand', 'owner', 'is_active', 'show_in_marketplace']
    search_fields = ['chassis_number', 'engine_number', 'brand', 'owner__name']
    ordering_fields = ['brand', 'year', 'market_value', 'monthly_fee', 'created_at']
    ordering = ['-created_at']

    def get_queryset(self):
        return super().get_queryset().select_related('owner', 'created_by', 'updated_by')
