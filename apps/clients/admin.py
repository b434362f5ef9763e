# apps/clients/admin.py
from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'client_type', 'is_active', 'tenant']
    list_filter = ['client_type', 'is_active', 'tenant']
    search_fields = ['name', 'phone']
    readonly_fields = ['created_at', 'updated_at', 'created_by', 'updated_by']

    def get_queryset(self, request):
        return Client.objects.all_tenants().select_related('tenant')
