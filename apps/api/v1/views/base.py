# apps/api/v1/views/base.py
"""
Base ViewSet classes for tenant-aware API views.
"""
from rest_framework import viewsets


class TenantQuerysetMixin:
    """
    Defers queryset evaluation to request time.

    A class-level `queryset = Model.objects.all()` is built at import time,
    when no tenant is set; building it per request lets TenantManager
    filter by the tenant TenantMiddleware resolved.
    """
    model = None  # Subclasses must set this

    def get_queryset(self):
        if self.model is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define 'model' attribute"
            )
        return self.model.objects.all()


class TenantModelViewSet(TenantQuerysetMixin, viewsets.ModelViewSet):
    """
    CRUD ViewSet for tenant-scoped models that stamps audit users.

    Usage:
        class ClientViewSet(TenantModelViewSet):
            model = Client
            serializer_class = ClientSerializer
    """

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)


class TenantReadOnlyModelViewSet(TenantQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    pass
