import uuid
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import CustomUser, RestaurantUser
from accounts.services import MembershipService
from menu.models import MenuCategory, MenuItem
from pos.models import Order, Table


class POSAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = CustomUser.objects.create_user(email='owner@test.com', password='Str0ng-Passw0rd!')
        self.waiter = CustomUser.objects.create_user(email='waiter@test.com', password='Str0ng-Passw0rd!')
        self.restaurant = MembershipService.create_restaurant(self.owner, 'Bistro')
        RestaurantUser.objects.create(restaurant=self.restaurant, user=self.waiter, role=RestaurantUser.STAFF)

        category = MenuCategory.objects.create(restaurant=self.restaurant, name='Mains')
        self.adobo = MenuItem.objects.create(
            restaurant=self.restaurant, category=category, name='Adobo', price=Decimal('120.50')
        )
        self.base = f'/api/restaurants/{self.restaurant.id}'
        self.client.force_authenticate(user=self.waiter)


class TableAPITest(POSAPITestCase):
    def test_create_and_list_tables(self):
        resp = self.client.post(f'{self.base}/tables/', {'name': 'T2', 'capacity': 2}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['status'], Table.AVAILABLE)
        self.client.post(f'{self.base}/tables/', {'name': 'T1', 'capacity': 4}, format='json')

        resp = self.client.get(f'{self.base}/tables/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([t['name'] for t in resp.json()], ['T1', 'T2'])

    def test_capacity_must_be_positive(self):
        for capacity in (0, -3):
            resp = self.client.post(f'{self.base}/tables/', {'name': 'T1', 'capacity': capacity}, format='json')
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json()['code'], 'invalid_capacity')
        self.assertFalse(Table.objects.exists())

    def test_update_table_status(self):
        table = Table.objects.create(restaurant=self.restaurant, name='T1', capacity=4)
        resp = self.client.patch(
            f'{self.base}/tables/{table.id}/', {'status': Table.OUT_OF_SERVICE}, format='json'
        )
        self.assertEqual(resp.status_code, 200)
        table.refresh_from_db()
        self.assertEqual(table.status, Table.OUT_OF_SERVICE)

    def test_other_restaurants_table_is_404(self):
        other_owner = CustomUser.objects.create_user(email='other@test.com', password='Str0ng-Passw0rd!')
        other = MembershipService.create_restaurant(other_owner, 'Other')
        foreign = Table.objects.create(restaurant=other, name='X', capacity=2)

        resp = self.client.get(f'{self.base}/tables/{foreign.id}/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['code'], 'not_found')
        self.assertEqual(self.client.get(f'/api/restaurants/{other.id}/tables/').status_code, 403)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(f'{self.base}/tables/').status_code, 401)


class OrderAPITest(POSAPITestCase):
    def _create_order(self, **data):
        resp = self.client.post(f'{self.base}/orders/', data, format='json')
        self.assertEqual(resp.status_code, 201)
        return resp.json()

    def test_order_flow(self):
        table = Table.objects.create(restaurant=self.restaurant, name='T1', capacity=4)
        order = self._create_order(table=str(table.id), notes='birthday')
        self.assertEqual(order['status'], 'pending')
        self.assertEqual(order['total_amount'], '0.00')
        self.assertEqual(order['table_name'], 'T1')
        self.assertEqual(order['created_by_email'], 'waiter@test.com')
        url = f"{self.base}/orders/{order['id']}"

        resp = self.client.post(f'{url}/items/', {'menu_item_id': str(self.adobo.id), 'quantity': 2}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['item']['subtotal'], '241.00')
        self.assertEqual(resp.json()['total_amount'], '241.00')
        item_id = resp.json()['item']['id']

        resp = self.client.get(f'{url}/')
        self.assertEqual(len(resp.json()['items']), 1)
        self.assertEqual(resp.json()['items'][0]['name'], 'Adobo')

        resp = self.client.delete(f'{url}/items/{item_id}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['total_amount'], '0.00')
        self.assertEqual(resp.json()['items'], [])

        resp = self.client.post(f'{url}/set_status/', {'status': 'confirmed'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'confirmed')

        resp = self.client.patch(f'{url}/', {'notes': 'no peanuts'}, format='json')
        self.assertEqual(resp.json()['notes'], 'no peanuts')

        resp = self.client.post(f'{url}/assign_table/', {'table': None}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()['table'])

    def test_add_item_errors(self):
        order = self._create_order()
        url = f"{self.base}/orders/{order['id']}/items/"

        resp = self.client.post(url, {'menu_item_id': str(self.adobo.id), 'quantity': 0}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'invalid_quantity')

        resp = self.client.post(url, {'menu_item_id': str(self.adobo.id), 'quantity': 'two'}, format='json')
        self.assertEqual(resp.json()['code'], 'invalid_quantity')

        resp = self.client.post(url, {'menu_item_id': str(self.adobo.id), 'quantity': 10 ** 9}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'invalid_quantity')
        self.assertEqual(Order.objects.get(id=order['id']).total_amount, Decimal('0.00'))

        resp = self.client.post(url, {'menu_item_id': str(uuid.uuid4())}, format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['code'], 'not_found')

        self.adobo.is_available = False
        self.adobo.save()
        resp = self.client.post(url, {'menu_item_id': str(self.adobo.id)}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'item_unavailable')

    def test_unknown_status_rejected(self):
        order = self._create_order()
        resp = self.client.post(
            f"{self.base}/orders/{order['id']}/set_status/", {'status': 'eaten'}, format='json'
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'invalid_order_status')
        self.assertEqual(Order.objects.get(id=order['id']).status, Order.PENDING)

    def test_cancel_requires_confirmation(self):
        order = self._create_order()
        url = f"{self.base}/orders/{order['id']}/cancel/"

        self.assertEqual(self.client.post(url, {}, format='json').status_code, 400)
        self.assertEqual(self.client.post(url, {'confirm': False}, format='json').status_code, 400)
        self.assertEqual(Order.objects.get(id=order['id']).status, Order.PENDING)

        resp = self.client.post(url, {'confirm': True}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'cancelled')

    def test_orders_are_never_deleted(self):
        order = self._create_order()
        resp = self.client.delete(f"{self.base}/orders/{order['id']}/")
        self.assertEqual(resp.status_code, 405)
        self.assertTrue(Order.objects.filter(id=order['id']).exists())

    def test_list_filters_by_status(self):
        self._create_order()
        second = self._create_order()
        self.client.post(f"{self.base}/orders/{second['id']}/set_status/", {'status': 'preparing'}, format='json')

        resp = self.client.get(f'{self.base}/orders/', {'status': 'preparing'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([o['id'] for o in resp.json()], [second['id']])

    def test_other_restaurants_order_is_404(self):
        other_owner = CustomUser.objects.create_user(email='other@test.com', password='Str0ng-Passw0rd!')
        other = MembershipService.create_restaurant(other_owner, 'Other')
        foreign = Order.objects.create(restaurant=other, created_by=other_owner)

        resp = self.client.get(f'{self.base}/orders/{foreign.id}/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['code'], 'not_found')
        resp = self.client.post(
            f'{self.base}/orders/{foreign.id}/set_status/', {'status': 'confirmed'}, format='json'
        )
        self.assertEqual(resp.status_code, 404)
        foreign.refresh_from_db()
        self.assertEqual(foreign.status, Order.PENDING)


class DashboardAPITest(POSAPITestCase):
    def test_dashboard(self):
        order = Order.objects.create(restaurant=self.restaurant, created_by=self.waiter)
        self.client.post(
            f'{self.base}/orders/{order.id}/items/', {'menu_item_id': str(self.adobo.id), 'quantity': 10}, format='json'
        )
        self.client.post(f'{self.base}/orders/{order.id}/set_status/', {'status': 'completed'}, format='json')

        resp = self.client.get(f'{self.base}/dashboard/')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['total_orders'], 1)
        self.assertEqual(data['completed_orders'], 1)
        self.assertEqual(data['total_sales'], '1205.00')
        self.assertEqual(data['total_sales_display'], '₱1,205.00')
        self.assertEqual(data['currency'], 'PHP')
        self.assertEqual(len(data['recent_orders']), 1)
