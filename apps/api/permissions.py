# apps/api/permissions.py
"""
Tenant-aware permissions for the REST API.

These permissions ensure users can only access data belonging to their tenant.
"""
from rest_framework import permissions


class IsTenantUser(permissions.BasePermission):
    """
    Permission that checks if the user belongs to the current tenant.

    This is applied globally and works with TenantMiddleware to ensure
    all API requests are properly scoped.
    """
    message = "You do not have permission to access this tenant's data."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        # Must have a tenant set (from TenantMiddleware)
        if getattr(request, 'tenant', None) is None:
            return False

        # Superusers can access any tenant
        if request.user.is_superuser:
            return True

        return request.user.tenant_id == request.tenant.pk

    def has_object_permission(self, request, view, obj):
        # Object must belong to the current tenant
        if hasattr(obj, 'tenant_id'):
            return obj.tenant_id == request.tenant.pk
        return True


# ============================================================================
# RBAC Permissions (Role-Based Access Control)
# ============================================================================

class IsInGroup(permissions.BasePermission):
    """Base class for group-based permissions."""
    group_name = None

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        # Superusers and Admin group always have access
        if request.user.is_superuser:
            return True
        return request.user.groups.filter(name__in=[self.group_name, 'Admin']).exists()


class IsManager(IsInGroup):
    """
    User must be in Manager or Admin group.
    Covers: cancelling and refunding invoices.
    """
    group_name = 'Manager'
    message = "Only managers can perform this action."
