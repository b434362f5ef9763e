from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class TenantUserAdmin(UserAdmin):
    """User admin with tenant membership."""
    list_display = ['username', 'name', 'email', 'tenant', 'is_staff', 'is_active']
    list_filter = ['tenant', 'is_staff', 'is_superuser', 'is_active', 'groups']
    fieldsets = UserAdmin.fieldsets + (
        ('Tenant', {'fields': ['name', 'tenant']}),
    )
