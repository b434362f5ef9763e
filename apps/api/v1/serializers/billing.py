# apps/api/v1/serializers/billing.py
"""
Serializers for billing models: Invoice, InvoiceTax, InvoiceCharge,
Payment, Reminder.

Invoices are read-only here. They are created by the ensure endpoint and
changed only through the action endpoints, which call BillingService; the
*InputSerializer classes validate those actions' request bodies.
"""
from decimal import Decimal

from rest_framework import serializers

from apps.billing.models import Invoice, InvoiceTax, InvoiceCharge, Payment, Reminder


class InvoiceTaxSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceTax
        fields = ['id', 'name', 'rate', 'amount']


class InvoiceChargeSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceCharge
        fields = ['id', 'description', 'amount', 'charge_type']


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment model."""
    invoice_number = serializers.CharField(source='invoice.invoice_number', read_only=True)
    received_by_name = serializers.CharField(source='received_by.username', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'invoice', 'invoice_number', 'payment_date', 'amount',
            'payment_method', 'reference_number', 'notes', 'status',
            'received_by', 'received_by_name', 'created_at',
        ]
        read_only_fields = fields


class ReminderSerializer(serializers.ModelSerializer):
    sent_by_name = serializers.CharField(source='sent_by.username', read_only=True)

    class Meta:
        model = Reminder
        fields = ['id', 'invoice', 'sent_date', 'reminder_type', 'status', 'sent_by', 'sent_by_name']
        read_only_fields = fields


class InvoiceListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for Invoice list views."""
    client_name = serializers.CharField(source='client.name', read_only=True)
    client_phone = serializers.CharField(source='client.phone', read_only=True)
    vehicle_label = serializers.CharField(source='vehicle.__str__', read_only=True)
    chassis_number = serializers.CharField(source='vehicle.chassis_number', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'transaction_type', 'billing_period',
            'client', 'client_name', 'client_phone',
            'vehicle', 'vehicle_label', 'chassis_number',
            'invoice_date', 'due_date', 'status', 'payment_status',
            'total_amount', 'paid_amount', 'balance_amount', 'is_overdue',
        ]
        read_only_fields = fields


class InvoiceDetailSerializer(InvoiceListSerializer):
    """Detailed serializer for Invoice with line items, payments and reminders."""
    taxes = InvoiceTaxSerializer(many=True, read_only=True)
    charges = InvoiceChargeSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    reminders = ReminderSerializer(many=True, read_only=True)
    payment_percentage = serializers.IntegerField(read_only=True)
    days_overdue = serializers.IntegerField(read_only=True)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, allow_null=True)
    updated_by_name = serializers.CharField(source='updated_by.username', read_only=True, allow_null=True)

    class Meta(InvoiceListSerializer.Meta):
        fields = InvoiceListSerializer.Meta.fields + [
            'cycle_anchor_day', 'base_amount', 'tax_amount', 'discount_amount',
            'payment_percentage', 'days_overdue', 'sent_at', 'terms', 'notes',
            'taxes', 'charges', 'payments', 'reminders',
            'created_by_name', 'updated_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


# ─── Action input ────────────────────────────────────────────────────────────

class PaymentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    payment_date = serializers.DateField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=Payment.STATUS_CHOICES, default=Payment.CLEARED)


class ReminderInputSerializer(serializers.Serializer):
    reminder_type = serializers.ChoiceField(choices=Reminder.TYPE_CHOICES)
    status = serializers.ChoiceField(choices=Reminder.STATUS_CHOICES, default='Sent')
    sent_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class TaxInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'))
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class ChargeInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    charge_type = serializers.ChoiceField(choices=InvoiceCharge.CHARGE_TYPE_CHOICES, default=InvoiceCharge.CHARGE)


class MarkPaidInputSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, default='Cash')
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class ReasonInputSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
