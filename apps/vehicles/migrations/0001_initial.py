import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenants', '0001_initial'),
        ('clients', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Vehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('chassis_number', models.CharField(help_text='17-character chassis (VIN) number, unique per tenant', max_length=17, validators=[django.core.validators.RegexValidator(message='Please enter a valid 17-character chassis number', regex='^[A-HJ-NPR-Z0-9]{17}$')])),
                ('engine_number', models.CharField(help_text='Engine number', max_length=50)),
                ('brand', models.CharField(max_length=50)),
                ('year', models.PositiveIntegerField(help_text='Manufacturing year', validators=[django.core.validators.MinValueValidator(1900)])),
                ('color', models.CharField(max_length=30)),
                ('mileage', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('Available', 'Available'), ('Reserved', 'Reserved'), ('Sold', 'Sold')], default='Available', max_length=20)),
                ('market_value', models.DecimalField(decimal_places=2, default=0, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('purchase_date', models.DateField(blank=True, default=django.utils.timezone.localdate, help_text='Purchase date; its day of month is the default billing anchor', null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('show_in_marketplace', models.BooleanField(default=False)),
                ('monthly_fee', models.DecimalField(decimal_places=2, default=0, help_text='Recurring monthly rental fee (0 = not billed)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('billing_anchor_day', models.PositiveSmallIntegerField(blank=True, help_text='Override for the invoice due day (1-28); defaults to the purchase day', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(28)])),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('owner', models.ForeignKey(blank=True, help_text='Client who owns the vehicle (billed monthly)', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='clients.client')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='%(class)s_set', to='tenants.tenant')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='vehicles_ve_tenant__51c0d2_idx'),
                    models.Index(fields=['tenant', 'brand'], name='vehicles_ve_tenant__9e4a17_idx'),
                    models.Index(fields=['tenant', 'owner'], name='vehicles_ve_tenant__c2f5b8_idx'),
                ],
                'unique_together': {('tenant', 'chassis_number')},
            },
        ),
    ]
