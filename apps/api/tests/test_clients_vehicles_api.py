# apps/api/tests/test_clients_vehicles_api.py
"""
Tests for Client and Vehicle API endpoints.

Test coverage:
- CRUD operations with audit stamping
- Filtering and search
- Per-tenant uniqueness and cross-tenant foreign keys
"""
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.clients.models import Client
from apps.tenants.models import Tenant
from apps.vehicles.models import Vehicle

User = get_user_model()


class InventoryAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.tenant = Tenant.objects.create(name='Elite Motors', subdomain='test-inventory', is_default=True)
        cls.other_tenant = Tenant.objects.create(name='Rival Motors', subdomain='test-inventory-rival')
        cls.user = User.objects.create_user(username='sales', password='testpass123', tenant=cls.tenant)
        cls.owner = Client.objects.create(tenant=cls.tenant, name='Asha Rao', phone='+91 98450 33333')
        cls.other_owner = Client.objects.create(tenant=cls.other_tenant, name='Ravi', phone='+91 98450 33333')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def vehicle_payload(self, **overrides):
        data = {
            'chassis_number': 'WAUZZZ8V0KA200001',
            'engine_number': 'e200001',
            'brand': 'Audi',
            'year': 2022,
            'color': 'Black',
            'owner': self.owner.pk,
            'monthly_fee': '1500.00',
        }
        data.update(overrides)
        return data


class ClientAPITest(InventoryAPITestCase):

    def test_list_only_own_tenant(self):
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Asha Rao')

    def test_create_stamps_tenant_and_user(self):
        response = self.client.post(
            '/api/v1/clients/', {'name': 'Fleet Co', 'phone': '+91 80 4000 0000', 'client_type': 'Company'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        client = Client.objects.all_tenants().get(pk=response.data['id'])
        self.assertEqual(client.tenant, self.tenant)
        self.assertEqual(client.created_by, self.user)
        self.assertEqual(response.data['created_by_name'], 'sales')

    def test_duplicate_phone_rejected_within_tenant(self):
        response = self.client.post('/api/v1/clients/', {'name': 'Copy', 'phone': '+91 98450 33333'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data['errors'])

    def test_search(self):
        Client.objects.create(tenant=self.tenant, name='Zed Traders', phone='+91 11 2222 3333')
        response = self.client.get('/api/v1/clients/', {'search': 'zed'})
        self.assertEqual([c['name'] for c in response.data['results']], ['Zed Traders'])

    def test_delete_client_with_vehicle_conflicts(self):
        Vehicle.objects.create(
            tenant=self.tenant, chassis_number='WAUZZZ8V0KA200009', engine_number='E9',
            brand='Audi', year=2020, color='Grey', owner=self.owner,
        )
        response = self.client.delete(f'/api/v1/clients/{self.owner.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data['success'])


class VehicleAPITest(InventoryAPITestCase):

    def test_create_vehicle(self):
        response = self.client.post('/api/v1/vehicles/', self.vehicle_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['engine_number'], 'E200001')
        self.assertEqual(response.data['owner_name'], 'Asha Rao')
        self.assertTrue(response.data['is_billable'])

    def test_invalid_chassis_number(self):
        response = self.client.post(
            '/api/v1/vehicles/', self.vehicle_payload(chassis_number='SHORT123'), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('chassis_number', response.data['errors'])

    def test_duplicate_chassis_rejected(self):
        self.client.post('/api/v1/vehicles/', self.vehicle_payload(), format='json')
        response = self.client.post('/api/v1/vehicles/', self.vehicle_payload(engine_number='E2'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_owner_from_other_tenant_rejected(self):
        response = self.client.post(
            '/api/v1/vehicles/', self.vehicle_payload(owner=self.other_owner.pk), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('owner', response.data['errors'])

    def test_anchor_day_range(self):
        response = self.client.post(
            '/api/v1/vehicles/', self.vehicle_payload(billing_anchor_day=31), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('billing_anchor_day', response.data['errors'])

    def test_update_stamps_updated_by(self):
        created = self.client.post('/api/v1/vehicles/', self.vehicle_payload(), format='json')
        response = self.client.patch(
            f"/api/v1/vehicles/{created.data['id']}/", {'monthly_fee': '1750.00'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        vehicle = Vehicle.objects.all_tenants().get(pk=created.data['id'])
        self.assertEqual(vehicle.monthly_fee, Decimal('1750.00'))
        self.assertEqual(vehicle.updated_by, self.user)

    def test_filter_by_status(self):
        self.client.post('/api/v1/vehicles/', self.vehicle_payload(), format='json')
        self.client.post(
            '/api/v1/vehicles/',
            self.vehicle_payload(chassis_number='WAUZZZ8V0KA200002', engine_number='E2', status='Sold'),
            format='json',
        )
        response = self.client.get('/api/v1/vehicles/', {'status': 'Sold'})
        self.assertEqual(response.data['count'], 1)
        self.assertFalse(response.data['results'][0]['is_billable'])
