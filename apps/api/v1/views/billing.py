# apps/api/v1/views/billing.py
"""
ViewSet for the billing ledger.

Invoices are never created or edited through generic CRUD. The ensure
endpoint creates monthly rental invoices; every other write goes through a
BillingService action so derived totals are recomputed before saving.
"""
import django_filters
from rest_framework import filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view

from apps.api.permissions import IsManager, IsTenantUser
from apps.api.responses import success_response
from apps.api.v1.serializers.billing import (
    InvoiceListSerializer, InvoiceDetailSerializer,
    PaymentSerializer, ReminderSerializer,
    PaymentInputSerializer, ReminderInputSerializer, TaxInputSerializer,
    ChargeInputSerializer, MarkPaidInputSerializer, ReasonInputSerializer,
)
from apps.billing.models import Invoice
from apps.billing.periods import current_period, parse_period
from apps.billing.services import BillingService
from .base import TenantReadOnlyModelViewSet

MONTH_PARAM = OpenApiParameter('month', OpenApiTypes.STR, description='Billing period YYYY-MM')


class InvoiceFilter(django_filters.FilterSet):
    month = django_filters.CharFilter(method='filter_month')

    class Meta:
        model = Invoice
        fields = ['transaction_type', 'status', 'payment_status', 'client', 'vehicle']

    def filter_month(self, queryset, name, value):
        parse_period(value)
        return queryset.filter(billing_period=value)


def _is_true(value):
    return str(value).lower() in ('1', 'true', 'yes')


@extend_schema_view(
    list=extend_schema(tags=['billing'], summary='List invoices', parameters=[MONTH_PARAM]),
    retrieve=extend_schema(tags=['billing'], summary='Get invoice details'),
)
class InvoiceViewSet(TenantReadOnlyModelViewSet):
    """
    ViewSet for Invoice model.

    Read endpoints plus the billing actions (ensure, payments, reminders,
    taxes, charges, send, mark-paid, cancel, refund).
    """
    model = Invoice
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = InvoiceFilter
    search_fields = ['invoice_number', 'client__name', 'client__phone', 'vehicle__chassis_number']
    ordering_fields = ['invoice_number', 'billing_period', 'invoice_date', 'due_date', 'total_amount', 'created_at']
    ordering = ['-billing_period', 'due_date', 'invoice_number']

    def get_queryset(self):
        qs = super().get_queryset().select_related('client', 'vehicle', 'created_by', 'updated_by')
        if self.action == 'retrieve':
            qs = qs.prefetch_related('taxes', 'charges', 'payments__received_by', 'reminders__sent_by')
        return qs

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return InvoiceDetailSerializer
        return InvoiceListSerializer

    def get_service(self):
        return BillingService(self.request.tenant, self.request.user)

    def _detail(self, invoice, message='', status_code=status.HTTP_200_OK):
        """Envelope with a freshly loaded invoice."""
        invoice = self.get_queryset().prefetch_related(
            'taxes', 'charges', 'payments__received_by', 'reminders__sent_by'
        ).get(pk=invoice.pk)
        data = InvoiceDetailSerializer(invoice, context={'request': self.request}).data
        return success_response(data, message=message, status=status_code)

    def _paginated(self, queryset, message=''):
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = InvoiceListSerializer(page, many=True, context={'request': self.request})
            return success_response(self.get_paginated_response(serializer.data).data, message=message)
        serializer = InvoiceListSerializer(queryset, many=True, context={'request': self.request})
        return success_response(serializer.data, message=message)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return self._paginated(queryset, message='Invoices retrieved')

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return success_response(serializer.data, message='Invoice retrieved')

    # ===== RECURRING INVOICES =====

    @extend_schema(
        tags=['billing'],
        summary='List bills for a month (optionally generating them)',
        parameters=[
            MONTH_PARAM,
            OpenApiParameter('lazy', OpenApiTypes.BOOL, description='Generate the month when it has no bills'),
        ],
    )
    @action(detail=False, methods=['get'], url_path='list')
    def list_bills(self, request):
        """
        Bills for ?month=YYYY-MM sorted by due date, or every period when
        month is omitted. With lazy=true an empty month is generated first.
        """
        month = request.query_params.get('month')
        service = self.get_service()

        if month:
            bills = service.list_monthly(month)
            if _is_true(request.query_params.get('lazy')) and not bills.exists():
                service.generate_monthly_invoices(month)
                bills = service.list_monthly(month)
        else:
            bills = service.list_invoices()

        data = {
            'period': month,
            'bills': InvoiceListSerializer(bills, many=True, context={'request': request}).data,
        }
        return success_response(data, message='Bills retrieved')

    @extend_schema(
        tags=['billing'],
        summary='Find or create the monthly rental invoice for a vehicle',
        parameters=[MONTH_PARAM],
        responses={200: InvoiceDetailSerializer, 201: InvoiceDetailSerializer},
    )
    @action(detail=False, methods=['get', 'post'], url_path=r'ensure/vehicle/(?P<vehicle_id>[^/.]+)')
    def ensure(self, request, vehicle_id=None):
        """Idempotent: repeated calls return the same invoice."""
        body = request.data if isinstance(request.data, dict) else {}
        month = request.query_params.get('month') or body.get('month') or current_period()
        result = self.get_service().ensure_monthly_invoice(vehicle_id, month)
        if result.created:
            return self._detail(result.invoice, 'Created monthly invoice', status.HTTP_201_CREATED)
        return self._detail(result.invoice, 'Existing monthly invoice')

    # ===== PAYMENTS & REMINDERS =====

    @extend_schema(tags=['billing'], summary='List payments for an invoice',
                   responses={200: PaymentSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        invoice = self.get_object()
        payments = invoice.payments.select_related('received_by', 'invoice')
        return success_response(PaymentSerializer(payments, many=True).data, message='Payments retrieved')

    @extend_schema(tags=['billing'], summary='Record a payment', request=PaymentInputSerializer)
    @payments.mapping.post
    def add_payment(self, request, pk=None):
        invoice = self.get_object()
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().add_payment(invoice, **serializer.validated_data)
        return self._detail(invoice, 'Payment recorded', status.HTTP_201_CREATED)

    @extend_schema(tags=['billing'], summary='List reminders for an invoice',
                   responses={200: ReminderSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def reminders(self, request, pk=None):
        invoice = self.get_object()
        reminders = invoice.reminders.select_related('sent_by')
        return success_response(ReminderSerializer(reminders, many=True).data, message='Reminders retrieved')

    @extend_schema(tags=['billing'], summary='Log a payment reminder', request=ReminderInputSerializer)
    @reminders.mapping.post
    def send_reminder(self, request, pk=None):
        invoice = self.get_object()
        serializer = ReminderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().send_reminder(invoice, **serializer.validated_data)
        return self._detail(invoice, 'Reminder sent', status.HTTP_201_CREATED)

    # ===== TAXES & CHARGES =====

    @extend_schema(tags=['billing'], summary='Add a tax line', request=TaxInputSerializer)
    @action(detail=True, methods=['post'])
    def taxes(self, request, pk=None):
        invoice = self.get_object()
        serializer = TaxInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().add_tax(invoice, **serializer.validated_data)
        return self._detail(invoice, 'Tax added', status.HTTP_201_CREATED)

    @extend_schema(tags=['billing'], summary='Add a charge or discount', request=ChargeInputSerializer)
    @action(detail=True, methods=['post'])
    def charges(self, request, pk=None):
        invoice = self.get_object()
        serializer = ChargeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().add_charge(invoice, **serializer.validated_data)
        return self._detail(invoice, 'Charge added', status.HTTP_201_CREATED)

    # ===== STATUS CHANGES =====

    @extend_schema(tags=['billing'], summary='Mark a draft invoice as sent', request=None)
    @action(detail=True, methods=['post'])
    def send(self, request, pk=None):
        invoice = self.get_service().mark_sent(self.get_object())
        return self._detail(invoice, 'Invoice sent')

    @extend_schema(tags=['billing'], summary='Settle the outstanding balance', request=MarkPaidInputSerializer)
    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        serializer = MarkPaidInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = self.get_service().mark_paid(self.get_object(), **serializer.validated_data)
        return self._detail(invoice, 'Invoice marked as paid')

    @extend_schema(tags=['billing'], summary='Cancel an invoice', request=ReasonInputSerializer)
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsTenantUser, IsManager])
    def cancel(self, request, pk=None):
        serializer = ReasonInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = self.get_service().cancel(self.get_object(), **serializer.validated_data)
        return self._detail(invoice, 'Invoice cancelled')

    @extend_schema(tags=['billing'], summary='Refund an invoice', request=ReasonInputSerializer)
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsTenantUser, IsManager])
    def refund(self, request, pk=None):
        serializer = ReasonInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = self.get_service().refund(self.get_object(), **serializer.validated_data)
        return self._detail(invoice, 'Invoice refunded')

    # ===== QUERIES =====

    @extend_schema(tags=['billing'], summary='List invoices with money still owed')
    @action(detail=False, methods=['get'])
    def outstanding(self, request):
        return self._paginated(self.get_service().get_outstanding_invoices(), message='Outstanding invoices')

    @extend_schema(tags=['billing'], summary='List overdue invoices')
    @action(detail=False, methods=['get'])
    def overdue(self, request):
        return self._paginated(self.get_service().get_overdue_invoices(), message='Overdue invoices')
