import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenants', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Client',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Client display name', max_length=100)),
                ('phone', models.CharField(help_text='Contact phone number (unique per tenant)', max_length=30, validators=[django.core.validators.RegexValidator(message='Please enter a valid phone number', regex='^[+]?[\\d\\s\\-()]+$')])),
                ('client_type', models.CharField(choices=[('Individual', 'Individual'), ('Dealer', 'Dealer'), ('Company', 'Company')], help_text='Kind of client', max_length=20)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive clients are hidden from selections')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='%(class)s_set', to='tenants.tenant')),
            ],
            options={
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['tenant', 'name'], name='clients_cli_tenant__3c9e1a_idx'),
                    models.Index(fields=['tenant', 'client_type'], name='clients_cli_tenant__7d2b44_idx'),
                    models.Index(fields=['tenant', 'is_active'], name='clients_cli_tenant__a81f06_idx'),
                ],
                'unique_together': {('tenant', 'phone')},
            },
        ),
    ]
