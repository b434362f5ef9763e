# apps/billing/admin.py
"""
Django admin configuration for billing models.

Derived totals are read-only here; saving an invoice or one of its inline
rows recomputes them.
"""
from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .calculator import recalculate
from .models import Invoice, InvoiceTax, InvoiceCharge, Payment, Reminder

DERIVED_FIELDS = [
    'tax_amount', 'discount_amount', 'total_amount',
    'paid_amount', 'balance_amount', 'payment_status',
]


class InvoiceTaxInline(admin.TabularInline):
    model = InvoiceTax
    extra = 0
    fields = ['name', 'rate', 'amount']


class InvoiceChargeInline(admin.TabularInline):
    model = InvoiceCharge
    extra = 0
    fields = ['description', 'charge_type', 'amount']


class PaymentInline(admin.TabularInline):
    """Inline editor for payments."""
    model = Payment
    extra = 0
    fields = ['payment_date', 'amount', 'payment_method', 'reference_number', 'status']
    readonly_fields = ['created_at']


class ReminderInline(admin.TabularInline):
    model = Reminder
    extra = 0
    fields = ['sent_date', 'reminder_type', 'status']


@admin.register(Invoice)
class InvoiceAdmin(SimpleHistoryAdmin):
    """Admin interface for Invoice."""
    list_display = [
        'invoice_number', 'billing_period', 'client', 'vehicle', 'due_date',
        'status', 'payment_status', 'total_amount', 'paid_amount', 'balance_amount'
    ]
    list_filter = ['status', 'payment_status', 'transaction_type', 'billing_period']
    search_fields = ['invoice_number', 'client__name', 'client__phone', 'vehicle__chassis_number']
    raw_id_fields = ['client', 'vehicle', 'created_by', 'updated_by']
    date_hierarchy = 'invoice_date'
    readonly_fields = ['created_at', 'updated_at', 'invoice_number', 'billing_period'] + DERIVED_FIELDS

    fieldsets = [
        (None, {
            'fields': ['invoice_number', 'client', 'vehicle', 'transaction_type', 'status']
        }),
        ('Billing Cycle', {
            'fields': ['billing_period', 'cycle_anchor_day', 'invoice_date', 'due_date', 'sent_at']
        }),
        ('Totals', {
            'fields': ['base_amount'] + DERIVED_FIELDS
        }),
        ('Notes', {
            'fields': ['terms', 'notes'],
            'classes': ['collapse']
        }),
        ('Audit', {
            'fields': ['created_by', 'updated_by', 'created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    inlines = [InvoiceTaxInline, InvoiceChargeInline, PaymentInline, ReminderInline]

    def save_model(self, request, obj, form, change):
        if not obj.tenant_id and hasattr(request, 'tenant'):
            obj.tenant = request.tenant
        if not obj.created_by_id:
            obj.created_by = request.user
        obj.updated_by = request.user
        recalculate(obj)
        super().save_model(request, obj, form, change)

    def save_formset(self, request, form, formset, change):
        instances = formset.save(commit=False)
        for instance in instances:
            if hasattr(instance, 'tenant_id') and not instance.tenant_id:
                instance.tenant = form.instance.tenant
            if hasattr(instance, 'received_by_id') and not instance.received_by_id:
                instance.received_by = request.user
            if hasattr(instance, 'sent_by_id') and not instance.sent_by_id:
                instance.sent_by = request.user
            instance.save()
        formset.save_m2m()

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        invoice = form.instance
        recalculate(invoice)
        invoice.save()


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for Payment."""
    list_display = [
        'invoice', 'payment_date', 'amount', 'payment_method',
        'status', 'reference_number', 'received_by'
    ]
    list_filter = ['payment_method', 'status', 'payment_date']
    search_fields = ['invoice__invoice_number', 'reference_number']
    raw_id_fields = ['invoice', 'received_by']
    date_hierarchy = 'payment_date'
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = ['invoice', 'reminder_type', 'status', 'sent_date', 'sent_by']
    list_filter = ['reminder_type', 'status']
    search_fields = ['invoice__invoice_number']
    raw_id_fields = ['invoice', 'sent_by']
