# apps/api/v1/views/clients.py
"""
ViewSet for Client model.
"""
from rest_framework import filters
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.clients.models import Client
from apps.api.v1.serializers.clients import ClientSerializer
from .base import TenantModelViewSet


@extend_schema_view(
    list=extend_schema(tags=['clients'], summary='List all clients'),
    retrieve=extend_schema(tags=['clients'], summary='Get client details'),
    create=extend_schema(tags=['clients'], summary='Create a new client'),
    update=extend_schema(tags=['clients'], summary='Update a client'),
    partial_update=extend_schema(tags=['clients'], summary='Partially update a client'),
    destroy=extend_schema(tags=['clients'], summary='Delete a client'),
)
class ClientViewSet(TenantModelViewSet):
    """
    ViewSet for Client model.

    Provides CRUD operations for clients (vehicle owners).
    """
    model = Client
    serializer_class = ClientSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['client_type', 'is_active']
    search_fields = ['name', 'phone']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']
