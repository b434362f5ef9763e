# apps/billing/services.py
"""
Billing service: recurring rental invoices and the invoice ledger.

BillingService handles:
- Ensuring exactly one monthly rental invoice per (vehicle, period)
- Batch generation of a month's invoices for every billable vehicle
- Monthly listing and outstanding/overdue queries
- Payments, reminders, taxes and charges (append-only)
- Explicit status changes: send, mark paid, cancel, refund

Every write to an invoice goes through calculator.recalculate() right
before save(). There is no application-level lock around invoice creation:
the (tenant, vehicle, transaction_type, billing_period) unique constraint
decides which of several concurrent creators wins, and the losers read the
winner's row.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.tenants.models import TenantSettings
from apps.vehicles.models import Vehicle
from .calculator import recalculate
from .exceptions import InvoiceNumberExhausted, VehicleNotBillable, VehicleNotFound
from .models import Invoice, InvoiceCharge, InvoiceTax, Payment, Reminder
from .numbering import allocate_invoice_number
from .periods import compute_anchor_day, compute_due_date, current_period, parse_period

logger = logging.getLogger(__name__)

# Attempts at inserting a new invoice when its number collides with one
# allocated concurrently for another vehicle.
MAX_NUMBER_ATTEMPTS = 5


@dataclass
class EnsureResult:
    created: bool
    invoice: Invoice


@dataclass
class GenerationSummary:
    period: str
    created: int = 0
    existing: int = 0
    failed: int = 0
    errors: list = field(default_factory=list)

    def as_dict(self):
        return {
            'period': self.period,
            'created': self.created,
            'existing': self.existing,
            'failed': self.failed,
            'errors': self.errors,
        }


def _error_message(exc):
    if isinstance(exc, ValidationError):
        return '; '.join(exc.messages)
    return str(exc)


def _to_decimal(value, label):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} must be a number", code='invalid_amount') from None


class BillingService:
    """
    Service for recurring rental invoices and ledger mutations.

    Usage:
        service = BillingService(tenant, user)

        # Idempotent: safe to call any number of times, concurrently too
        result = service.ensure_monthly_invoice(vehicle.pk, '2024-02')
        result.created   # True only for the call that inserted the row
        result.invoice   # Invoice with client and vehicle loaded

        # Record a payment (recomputes totals and payment status)
        service.add_payment(result.invoice, Decimal('5000'), 'Bank Transfer')

        # Everything for a month, sorted by due date
        service.list_monthly('2024-02')
    """

    def __init__(self, tenant, user=None):
        """
        Initialize billing service.

        Args:
            tenant: Tenant instance to scope operations
            user: Acting user, stamped on created_by/updated_by/received_by
        """
        self.tenant = tenant
        self.user = user

    # ===== RECURRING INVOICES =====

    def ensure_monthly_invoice(self, vehicle_id, period, invoice_date=None):
        """
        Find or create the rental invoice for a vehicle and billing period.

        All eligibility checks run before anything is written. A new invoice
        snapshots the vehicle's monthly fee and anchor day; an existing one
        is returned untouched apart from updated_by.

        Args:
            vehicle_id: Vehicle primary key
            period: Billing period 'YYYY-MM'
            invoice_date: Creation date (defaults to today); its month picks
                the invoice number sequence

        Returns:
            EnsureResult(created, invoice)

        Raises:
            VehicleNotFound: No such vehicle for this tenant
            VehicleNotBillable: Inactive, sold, ownerless or without a fee
            ValidationError: Malformed period
        """
        parse_period(period)
        vehicle = self._get_vehicle(vehicle_id)
        self.check_eligibility(vehicle)

        anchor_day = compute_anchor_day(vehicle)
        due_date = compute_due_date(period, anchor_day)
        if invoice_date is None:
            invoice_date = timezone.localdate()

        existing = self._find_rental_invoice(vehicle, period)
        if existing is not None:
            logger.debug(f'Rental invoice {existing.invoice_number} already exists for vehicle={vehicle.pk} period={period}')
            return EnsureResult(created=False, invoice=self._touch(existing))

        last_error = None
        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            invoice_number = allocate_invoice_number(self.tenant, invoice_date)
            try:
                with transaction.atomic():
                    invoice = self._insert_rental_invoice(
                        vehicle, period, anchor_day, due_date, invoice_number, invoice_date,
                    )
            except IntegrityError as e:
                last_error = e
                existing = self._find_rental_invoice(vehicle, period)
                if existing is not None:
                    # Another caller created it between our lookup and insert
                    logger.info(
                        f'Concurrent creation detected for vehicle={vehicle.pk} period={period}; '
                        f'using {existing.invoice_number}'
                    )
                    return EnsureResult(created=False, invoice=self._touch(existing))
                if not self._invoices().filter(invoice_number=invoice_number).exists():
                    # Not a uniqueness conflict (NOT NULL, foreign key, ...)
                    logger.error(f'Rental invoice insert failed for vehicle={vehicle.pk} period={period}: {e}')
                    raise
                logger.warning(
                    f'Invoice number {invoice_number} already taken '
                    f'(attempt {attempt}/{MAX_NUMBER_ATTEMPTS}), allocating another'
                )
                continue

            logger.info(
                f'Created rental invoice {invoice.invoice_number} for vehicle={vehicle.pk} '
                f'period={period} due={due_date} amount={invoice.total_amount} tenant={self.tenant.pk}'
            )
            return EnsureResult(created=True, invoice=self._with_references(invoice.pk))

        raise InvoiceNumberExhausted(
            f"Could not allocate a unique invoice number for vehicle {vehicle.pk} "
            f"after {MAX_NUMBER_ATTEMPTS} attempts"
        ) from last_error

    def generate_monthly_invoices(self, period=None):
        """
        Ensure the period's rental invoice for every billable vehicle.

        A failure for one vehicle is logged and counted; it never stops the
        rest of the batch.

        Returns:
            GenerationSummary
        """
        period = period or current_period()
        parse_period(period)
        summary = GenerationSummary(period=period)

        vehicle_ids = list(self.billable_vehicles().values_list('pk', flat=True))
        logger.info(f'Generating {period} invoices for {len(vehicle_ids)} vehicles (tenant={self.tenant.pk})')

        for vehicle_id in vehicle_ids:
            try:
                result = self.ensure_monthly_invoice(vehicle_id, period)
            except (ValidationError, ObjectDoesNotExist, InvoiceNumberExhausted, DatabaseError) as e:
                logger.warning(f'Failed to ensure {period} invoice for vehicle={vehicle_id}: {_error_message(e)}')
                summary.failed += 1
                summary.errors.append({'vehicle': vehicle_id, 'error': _error_message(e)})
                continue
            if result.created:
                summary.created += 1
            else:
                summary.existing += 1

        logger.info(
            f'Generated {period} invoices: created={summary.created} '
            f'existing={summary.existing} failed={summary.failed}'
        )
        return summary

    @staticmethod
    def check_eligibility(vehicle):
        """
        Raise VehicleNotBillable unless the vehicle can be billed monthly.
        """
        if not vehicle.is_active:
            raise VehicleNotBillable('vehicle_inactive')
        if vehicle.status == Vehicle.STATUS_SOLD:
            raise VehicleNotBillable('vehicle_sold')
        if vehicle.owner_id is None:
            raise VehicleNotBillable('vehicle_no_owner')
        if vehicle.monthly_fee is None or vehicle.monthly_fee <= 0:
            raise VehicleNotBillable('monthly_fee_not_set')

    def billable_vehicles(self):
        """Vehicles that pass every eligibility check."""
        return Vehicle.objects.all_tenants().filter(
            tenant=self.tenant,
            is_active=True,
            owner__isnull=False,
            monthly_fee__gt=0,
        ).exclude(status=Vehicle.STATUS_SOLD).order_by('pk')

    # ===== QUERIES =====

    def list_monthly(self, period):
        """Rental invoices for a period, with client and vehicle, by due date."""
        parse_period(period)
        return self._invoices().filter(
            transaction_type=Invoice.TYPE_RENTAL,
            billing_period=period,
        ).select_related(
            'client', 'vehicle', 'vehicle__owner'
        ).order_by('due_date', 'invoice_number')

    def list_invoices(self, period=None, transaction_type=Invoice.TYPE_RENTAL):
        """Invoices across all periods (newest period first) or one period."""
        qs = self._invoices().select_related('client', 'vehicle', 'vehicle__owner')
        if transaction_type:
            qs = qs.filter(transaction_type=transaction_type)
        if period:
            parse_period(period)
            qs = qs.filter(billing_period=period)
        return qs.order_by('-billing_period', 'due_date', 'invoice_number')

    def get_outstanding_invoices(self, client=None):
        """Invoices with money still owed."""
        qs = self._invoices().filter(
            payment_status__in=[Invoice.PAYMENT_PENDING, Invoice.PAYMENT_PARTIAL, Invoice.PAYMENT_OVERDUE],
        ).exclude(
            status__in=[Invoice.STATUS_CANCELLED, Invoice.STATUS_REFUNDED],
        )
        if client:
            qs = qs.filter(client=client)
        return qs.select_related('client', 'vehicle').order_by('due_date')

    def get_overdue_invoices(self, client=None):
        """Unpaid invoices past their due date."""
        today = timezone.localdate()
        qs = self.get_outstanding_invoices(client=client).filter(due_date__lte=today)
        return qs

    def refresh_overdue(self, today=None):
        """
        Recompute unpaid past-due invoices so their stored payment status
        reads Overdue.

        Returns:
            int: Number of invoices updated
        """
        today = today or timezone.localdate()
        candidates = self._invoices().filter(
            due_date__lte=today,
        ).exclude(
            payment_status__in=[Invoice.PAYMENT_PAID, Invoice.PAYMENT_OVERDUE],
        ).exclude(
            status__in=[Invoice.STATUS_CANCELLED, Invoice.STATUS_REFUNDED],
        ).values_list('pk', flat=True)

        count = 0
        for pk in list(candidates):
            with transaction.atomic():
                invoice = self._invoices().select_for_update().get(pk=pk)
                recalculate(invoice, today=today)
                invoice.save()
            count += 1
        if count:
            logger.info(f'Marked {count} invoices overdue (tenant={self.tenant.pk})')
        return count

    # ===== PAYMENTS & REMINDERS =====

    def add_payment(self, invoice, amount, payment_method, reference_number='',
                    payment_date=None, notes='', status=Payment.CLEARED):
        """
        Append a payment and recompute the invoice.

        Args:
            invoice: Invoice instance
            amount: Payment amount (> 0)
            payment_method: One of Payment.METHOD_CHOICES
            reference_number: Cheque number, transaction ID, etc.
            payment_date: Defaults to today
            notes: Free text
            status: Payment status; only Cleared counts as paid

        Returns:
            Payment instance (payment.invoice holds the recomputed invoice)
        """
        amount = _to_decimal(amount, 'Payment amount')
        if amount <= 0:
            raise ValidationError("Payment amount must be positive", code='invalid_amount')
        if payment_method not in dict(Payment.METHOD_CHOICES):
            raise ValidationError(f"Unknown payment method '{payment_method}'", code='invalid_method')
        if status not in dict(Payment.STATUS_CHOICES):
            raise ValidationError(f"Unknown payment status '{status}'", code='invalid_status')
        self._require_user('record a payment')

        with transaction.atomic():
            invoice = self._lock(invoice)
            if invoice.is_closed:
                raise ValidationError(
                    f"Cannot record payment on invoice with status '{invoice.status}'",
                    code='invoice_closed',
                )
            payment = Payment.objects.create(
                tenant=self.tenant,
                invoice=invoice,
                payment_date=payment_date or timezone.localdate(),
                amount=amount,
                payment_method=payment_method,
                reference_number=reference_number,
                notes=notes,
                received_by=self.user,
                status=status,
            )
            self._save(invoice)

        logger.info(
            f'Payment {amount} ({status}) recorded on {invoice.invoice_number}: '
            f'paid={invoice.paid_amount} balance={invoice.balance_amount} status={invoice.payment_status}'
        )
        return payment

    def send_reminder(self, invoice, reminder_type, status='Sent', sent_date=None):
        """
        Append a reminder. Totals are unaffected, so no recompute.

        Returns:
            Reminder instance
        """
        if reminder_type not in dict(Reminder.TYPE_CHOICES):
            raise ValidationError(f"Unknown reminder type '{reminder_type}'", code='invalid_reminder_type')
        if status not in dict(Reminder.STATUS_CHOICES):
            raise ValidationError(f"Unknown reminder status '{status}'", code='invalid_status')
        self._require_user('send a reminder')

        invoice = self._invoices().get(pk=invoice.pk)
        if invoice.is_closed or invoice.payment_status == Invoice.PAYMENT_PAID:
            raise ValidationError(
                f"No payment is due on invoice {invoice.invoice_number}",
                code='nothing_outstanding',
            )

        reminder = Reminder.objects.create(
            tenant=self.tenant,
            invoice=invoice,
            reminder_type=reminder_type,
            status=status,
            sent_date=sent_date or timezone.now(),
            sent_by=self.user,
        )
        logger.info(f'{reminder_type} reminder logged for {invoice.invoice_number}')
        return reminder

    # ===== TAXES & CHARGES =====

    def add_tax(self, invoice, name, rate, amount):
        """Append a pre-computed tax line and recompute the invoice."""
        rate = _to_decimal(rate, 'Tax rate')
        amount = _to_decimal(amount, 'Tax amount')
        if not Decimal('0') <= rate <= Decimal('100'):
            raise ValidationError("Tax rate must be between 0 and 100", code='invalid_rate')
        if amount < 0:
            raise ValidationError("Tax amount cannot be negative", code='invalid_amount')

        with transaction.atomic():
            invoice = self._lock_editable(invoice)
            tax = InvoiceTax.objects.create(
                tenant=self.tenant, invoice=invoice, name=name, rate=rate, amount=amount,
            )
            self._save(invoice)
        return tax

    def add_charge(self, invoice, description, amount, charge_type=InvoiceCharge.CHARGE):
        """Append an additional charge or discount and recompute the invoice."""
        amount = _to_decimal(amount, 'Charge amount')
        if charge_type not in dict(InvoiceCharge.CHARGE_TYPE_CHOICES):
            raise ValidationError(f"Unknown charge type '{charge_type}'", code='invalid_charge_type')

        with transaction.atomic():
            invoice = self._lock_editable(invoice)
            charge = InvoiceCharge.objects.create(
                tenant=self.tenant,
                invoice=invoice,
                description=description,
                amount=amount,
                charge_type=charge_type,
            )
            self._save(invoice)
        return charge

    # ===== STATUS CHANGES =====

    def mark_sent(self, invoice):
        """Mark a draft invoice as sent to the client."""
        with transaction.atomic():
            invoice = self._lock(invoice)
            if invoice.status != Invoice.STATUS_DRAFT:
                raise ValidationError(
                    f"Can only send draft invoices (status is '{invoice.status}')",
                    code='invalid_status',
                )
            invoice.status = Invoice.STATUS_SENT
            invoice.sent_at = timezone.now()
            self._save(invoice)
        return invoice

    def mark_paid(self, invoice, payment_method='Cash', reference_number=''):
        """
        Settle the outstanding balance.

        Records a Cleared payment for the balance rather than overwriting
        paid_amount, so the derived fields stay consistent with payments.
        """
        if payment_method not in dict(Payment.METHOD_CHOICES):
            raise ValidationError(f"Unknown payment method '{payment_method}'", code='invalid_method')
        self._require_user('mark an invoice paid')

        with transaction.atomic():
            invoice = self._lock(invoice)
            if invoice.is_closed:
                raise ValidationError(
                    f"Cannot mark invoice with status '{invoice.status}' as paid",
                    code='invoice_closed',
                )
            recalculate(invoice)
            if invoice.balance_amount <= 0:
                raise ValidationError(
                    f"Invoice {invoice.invoice_number} has no outstanding balance",
                    code='nothing_outstanding',
                )
            Payment.objects.create(
                tenant=self.tenant,
                invoice=invoice,
                payment_date=timezone.localdate(),
                amount=invoice.balance_amount,
                payment_method=payment_method,
                reference_number=reference_number,
                notes='Marked as paid',
                received_by=self.user,
                status=Payment.CLEARED,
            )
            self._save(invoice)

        logger.info(f'Invoice {invoice.invoice_number} marked paid')
        return invoice

    def cancel(self, invoice, reason=''):
        """
        Cancel an invoice. Cancellation is a status change; the row stays.
        """
        with transaction.atomic():
            invoice = self._lock(invoice)
            if invoice.is_closed:
                raise ValidationError(
                    f"Invoice is already {invoice.status.lower()}",
                    code='invoice_closed',
                )
            recalculate(invoice)
            if invoice.paid_amount > 0:
                raise ValidationError(
                    "Cannot cancel an invoice with cleared payments. Refund first.",
                    code='has_payments',
                )
            invoice.status = Invoice.STATUS_CANCELLED
            if reason:
                invoice.notes = f"{invoice.notes}\nCancelled: {reason}".strip()
            self._save(invoice)

        logger.info(f'Invoice {invoice.invoice_number} cancelled')
        return invoice

    def refund(self, invoice, reason=''):
        """Mark a (partly) paid invoice as refunded."""
        with transaction.atomic():
            invoice = self._lock(invoice)
            if invoice.is_closed:
                raise ValidationError(
                    f"Invoice is already {invoice.status.lower()}",
                    code='invoice_closed',
                )
            recalculate(invoice)
            if invoice.paid_amount <= 0:
                raise ValidationError(
                    "Invoice has no cleared payments to refund",
                    code='nothing_to_refund',
                )
            invoice.status = Invoice.STATUS_REFUNDED
            if reason:
                invoice.notes = f"{invoice.notes}\nRefunded: {reason}".strip()
            self._save(invoice)

        logger.info(f'Invoice {invoice.invoice_number} refunded')
        return invoice

    # ===== HELPERS =====

    def _invoices(self):
        return Invoice.objects.all_tenants().filter(tenant=self.tenant)

    def _get_vehicle(self, vehicle_id):
        try:
            return Vehicle.objects.all_tenants().select_related('owner').get(
                tenant=self.tenant, pk=vehicle_id,
            )
        except (Vehicle.DoesNotExist, ValueError, TypeError):
            raise VehicleNotFound(vehicle_id) from None

    def _find_rental_invoice(self, vehicle, period):
        return self._invoices().filter(
            vehicle=vehicle,
            transaction_type=Invoice.TYPE_RENTAL,
            billing_period=period,
        ).first()

    def _insert_rental_invoice(self, vehicle, period, anchor_day, due_date, invoice_number, invoice_date):
        invoice = Invoice(
            tenant=self.tenant,
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            due_date=due_date,
            client_id=vehicle.owner_id,
            vehicle=vehicle,
            transaction_type=Invoice.TYPE_RENTAL,
            billing_period=period,
            cycle_anchor_day=anchor_day,
            base_amount=vehicle.monthly_fee,
            total_amount=vehicle.monthly_fee,
            terms=self._default_terms(),
            created_by=self.user,
            updated_by=self.user,
        )
        recalculate(invoice)
        invoice.save(force_insert=True)
        return invoice

    def _touch(self, invoice):
        """Stamp updated_by on an existing invoice and reload it with references."""
        if self.user is not None:
            self._invoices().filter(pk=invoice.pk).update(updated_by=self.user, updated_at=timezone.now())
        return self._with_references(invoice.pk)

    def _with_references(self, pk):
        return self._invoices().select_related('client', 'vehicle', 'vehicle__owner').get(pk=pk)

    def _default_terms(self):
        terms = TenantSettings.objects.filter(tenant=self.tenant).values_list('invoice_terms', flat=True).first()
        return terms or ''

    def _lock(self, invoice):
        """Re-read the invoice under a row lock (caller holds a transaction)."""
        return self._invoices().select_for_update().get(pk=invoice.pk)

    def _lock_editable(self, invoice):
        invoice = self._lock(invoice)
        if invoice.is_closed or invoice.status == Invoice.STATUS_PAID:
            raise ValidationError(
                f"Cannot change line items on invoice with status '{invoice.status}'",
                code='invoice_locked',
            )
        return invoice

    def _save(self, invoice):
        recalculate(invoice)
        if self.user is not None:
            invoice.updated_by = self.user
        invoice.save()
        return invoice

    def _require_user(self, action):
        if self.user is None:
            raise ValidationError(f"An acting user is required to {action}", code='user_required')
