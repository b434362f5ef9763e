import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Company name', max_length=255)),
                ('subdomain', models.CharField(help_text="Subdomain for accessing the system (e.g., 'acme' for acme.autoledger.app)", max_length=63, unique=True)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive tenants cannot log in')),
                ('is_default', models.BooleanField(default=False, help_text='Default tenant for development (only one should be default)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['subdomain'], name='tenants_ten_subdoma_6f1f3c_idx'),
                    models.Index(fields=['is_active'], name='tenants_ten_is_acti_0b8b4e_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TenantSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(blank=True, help_text='Full legal company name', max_length=255)),
                ('timezone', models.CharField(default='UTC', help_text='Default timezone for the tenant', max_length=50)),
                ('currency', models.CharField(default='USD', help_text='Currency code (ISO 4217)', max_length=3)),
                ('invoice_terms', models.TextField(blank=True, help_text='Terms printed on every new monthly rental invoice', max_length=1000)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='settings', to='tenants.tenant')),
            ],
            options={
                'verbose_name_plural': 'tenant settings',
            },
        ),
    ]
