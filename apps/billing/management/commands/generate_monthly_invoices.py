# apps/billing/management/commands/generate_monthly_invoices.py
"""
Management command to generate a month's rental invoices.

Safe to run repeatedly (e.g. from cron); vehicles that already have an
invoice for the period are counted as existing.

Usage:
    python manage.py generate_monthly_invoices
    python manage.py generate_monthly_invoices --tenant elite --period 2024-02
    python manage.py generate_monthly_invoices --user admin --refresh-overdue
"""
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from apps.billing.services import BillingService
from apps.tenants.models import Tenant
from shared.managers import set_current_tenant


class Command(BaseCommand):
    help = 'Ensure monthly rental invoices for every billable vehicle'

    def add_arguments(self, parser):
        parser.add_argument(
            '--tenant',
            help='Tenant subdomain (defaults to the default tenant)',
        )
        parser.add_argument(
            '--period',
            help='Billing period YYYY-MM (defaults to the current month)',
        )
        parser.add_argument(
            '--user',
            help='Username recorded as the creator of new invoices',
        )
        parser.add_argument(
            '--refresh-overdue',
            action='store_true',
            help='Also recompute unpaid invoices that are past due',
        )

    def handle(self, *args, **options):
        tenant = self._get_tenant(options['tenant'])
        user = self._get_user(options['user'])

        set_current_tenant(tenant)
        try:
            service = BillingService(tenant, user)
            try:
                summary = service.generate_monthly_invoices(options['period'])
            except ValidationError as e:
                raise CommandError('; '.join(e.messages))

            self.stdout.write(self.style.SUCCESS(
                f'{tenant.name} {summary.period}: created {summary.created}, '
                f'existing {summary.existing}, failed {summary.failed}'
            ))
            for error in summary.errors:
                self.stdout.write(self.style.WARNING(f"  vehicle {error['vehicle']}: {error['error']}"))

            if options['refresh_overdue']:
                count = service.refresh_overdue()
                self.stdout.write(self.style.SUCCESS(f'Marked {count} invoices overdue'))
        finally:
            set_current_tenant(None)

    def _get_tenant(self, subdomain):
        if subdomain:
            tenant = Tenant.objects.filter(subdomain=subdomain, is_active=True).first()
            if tenant is None:
                raise CommandError(f"No active tenant with subdomain '{subdomain}'")
            return tenant
        tenant = Tenant.objects.filter(is_default=True, is_active=True).first()
        if tenant is None:
            raise CommandError('No active default tenant. Run create_default_tenant or pass --tenant.')
        return tenant

    def _get_user(self, username):
        if not username:
            return None
        User = get_user_model()
        try:
            return User.objects.get(username=username)
        except User.DoesNotExist:
            raise CommandError(f"No user named '{username}'")
