from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from accounts.models import CustomUser, RestaurantUser
from accounts.services import MembershipService
from core.exceptions import (
    InvalidOrderStatus, InvalidQuantity, ItemUnavailable, NotFound,
)
from core.utils import get_today_range
from menu.models import MenuCategory, MenuItem
from pos.models import Order, OrderItem, Table
from pos.services import OrderService, POSAnalyticsService


def make_restaurant(email, name):
    owner = CustomUser.objects.create_user(email=email, password='Str0ng-Passw0rd!')
    restaurant = MembershipService.create_restaurant(owner, name)
    return owner, restaurant, MembershipService.resolve_context(owner, restaurant.id)


def make_menu_item(restaurant, name='Adobo', price='120.50', available=True):
    category, _ = MenuCategory.objects.get_or_create(restaurant=restaurant, name='Mains')
    return MenuItem.objects.create(
        restaurant=restaurant, category=category, name=name, price=Decimal(price), is_available=available
    )


class OrderServiceTest(TestCase):
    def setUp(self):
        self.owner, self.restaurant, self.context = make_restaurant('owner@test.com', 'Bistro')
        self.adobo = make_menu_item(self.restaurant)
        self.rice = make_menu_item(self.restaurant, name='Rice', price='25.00')
        self.order = OrderService.create_order(self.context, notes='window seat')

    def test_create_order_defaults(self):
        self.assertEqual(self.order.status, Order.PENDING)
        self.assertEqual(self.order.total_amount, Decimal('0.00'))
        self.assertEqual(self.order.created_by, self.owner)
        self.assertEqual(self.order.notes, 'window seat')
        self.assertIsNone(self.order.table)

    def test_add_item_snapshots_price_and_updates_total(self):
        item, order = OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=2, notes='spicy')

        self.assertEqual(item.unit_price, Decimal('120.50'))
        self.assertEqual(item.subtotal, Decimal('241.00'))
        self.assertEqual(item.notes, 'spicy')
        self.assertEqual(order.total_amount, Decimal('241.00'))

        self.adobo.price = Decimal('999.00')
        self.adobo.save()
        item.refresh_from_db()
        self.assertEqual(item.unit_price, Decimal('120.50'))

        OrderService.add_item(self.context, self.order.id, self.rice.id, quantity='3')
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal('316.00'))

    def test_total_always_equals_sum_of_subtotals(self):
        first, _ = OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=1)
        OrderService.add_item(self.context, self.order.id, self.rice.id, quantity=4)
        OrderService.remove_item(self.context, self.order.id, first.id)
        OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=3)

        self.order.refresh_from_db()
        subtotals = sum(i.subtotal for i in OrderItem.objects.filter(order=self.order))
        self.assertEqual(self.order.total_amount, subtotals)
        self.assertEqual(self.order.total_amount, Decimal('461.50'))

    def test_remove_last_item_resets_total(self):
        item, _ = OrderService.add_item(self.context, self.order.id, self.adobo.id)
        order = OrderService.remove_item(self.context, self.order.id, item.id)
        self.assertEqual(order.total_amount, Decimal('0.00'))
        self.assertFalse(OrderItem.objects.filter(id=item.id).exists())

    def test_invalid_quantities(self):
        for quantity in (0, -1, 1.5, 'abc', '', None, True):
            with self.assertRaises(InvalidQuantity):
                OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=quantity)
        self.assertFalse(OrderItem.objects.exists())

    def test_quantity_that_overflows_the_total_is_rejected(self):
        with self.assertRaises(InvalidQuantity):
            OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=10 ** 9)
        with self.assertRaises(InvalidQuantity):
            OrderService.add_item(self.context, self.order.id, self.adobo.id, quantity=2 ** 40)

        OrderService.add_item(self.context, self.order.id, self.rice.id, quantity=3_999_999)
        with self.assertRaises(InvalidQuantity):
            OrderService.add_item(self.context, self.order.id, self.rice.id, quantity=1)

        self.order.refresh_from_db()
        self.assertEqual(OrderItem.objects.filter(order=self.order).count(), 1)
        self.assertEqual(self.order.total_amount, Decimal('99999975.00'))

    def test_unavailable_item(self):
        self.adobo.is_available = False
        self.adobo.save()
        with self.assertRaises(ItemUnavailable):
            OrderService.add_item(self.context, self.order.id, self.adobo.id)
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal('0.00'))

    def test_remove_item_of_other_order(self):
        other = OrderService.create_order(self.context)
        item, _ = OrderService.add_item(self.context, other.id, self.adobo.id)
        with self.assertRaises(NotFound):
            OrderService.remove_item(self.context, self.order.id, item.id)
        self.assertTrue(OrderItem.objects.filter(id=item.id).exists())

    def test_permissive_transitions_by_default(self):
        OrderService.transition_status(self.context, self.order.id, Order.COMPLETED)
        order = OrderService.transition_status(self.context, self.order.id, Order.PENDING)
        self.assertEqual(order.status, Order.PENDING)

    def test_unknown_status(self):
        with self.assertRaises(InvalidOrderStatus):
            OrderService.transition_status(self.context, self.order.id, 'eaten')

    @override_settings(ORDER_STRICT_TRANSITIONS=True)
    def test_strict_transitions(self):
        with self.assertRaises(InvalidOrderStatus):
            OrderService.transition_status(self.context, self.order.id, Order.READY)

        for status in (Order.CONFIRMED, Order.PREPARING, Order.READY, Order.SERVED, Order.COMPLETED):
            OrderService.transition_status(self.context, self.order.id, status)

        with self.assertRaises(InvalidOrderStatus):
            OrderService.cancel(self.context, self.order.id)

        other = OrderService.create_order(self.context)
        OrderService.cancel(self.context, other.id)
        with self.assertRaises(InvalidOrderStatus):
            OrderService.transition_status(self.context, other.id, Order.PENDING)

    def test_assign_table(self):
        table = Table.objects.create(restaurant=self.restaurant, name='T1', capacity=4)

        order = OrderService.assign_table(self.context, self.order.id, table.id)
        self.assertEqual(order.table, table)
        order = OrderService.assign_table(self.context, self.order.id, table.id)
        self.assertEqual(order.table, table)
        order = OrderService.assign_table(self.context, self.order.id, None)
        self.assertIsNone(order.table)

    def test_update_notes(self):
        order = OrderService.update_notes(self.context, self.order.id, 'no onions')
        self.assertEqual(order.notes, 'no onions')

    def test_staff_member_can_take_orders(self):
        waiter = CustomUser.objects.create_user(email='waiter@test.com', password='Str0ng-Passw0rd!')
        RestaurantUser.objects.create(restaurant=self.restaurant, user=waiter, role=RestaurantUser.STAFF)
        context = MembershipService.resolve_context(waiter, self.restaurant.id)

        order = OrderService.create_order(context)
        self.assertEqual(order.created_by, waiter)


class TenancyTest(TestCase):
    def setUp(self):
        _, self.restaurant_a, self.context_a = make_restaurant('a@test.com', 'A')
        _, self.restaurant_b, self.context_b = make_restaurant('b@test.com', 'B')
        self.item_a = make_menu_item(self.restaurant_a)
        self.item_b = make_menu_item(self.restaurant_b)
        self.order_a = OrderService.create_order(self.context_a)
        self.table_b = Table.objects.create(restaurant=self.restaurant_b, name='B1', capacity=2)

    def test_other_restaurants_order_is_not_found(self):
        with self.assertRaises(NotFound):
            OrderService.add_item(self.context_b, self.order_a.id, self.item_b.id)
        with self.assertRaises(NotFound):
            OrderService.transition_status(self.context_b, self.order_a.id, Order.CONFIRMED)
        with self.assertRaises(NotFound):
            OrderService.cancel(self.context_b, self.order_a.id)
        self.order_a.refresh_from_db()
        self.assertEqual(self.order_a.status, Order.PENDING)

    def test_other_restaurants_menu_item_is_not_found(self):
        with self.assertRaises(NotFound):
            OrderService.add_item(self.context_a, self.order_a.id, self.item_b.id)

    def test_other_restaurants_table_is_not_found(self):
        with self.assertRaises(NotFound):
            OrderService.assign_table(self.context_a, self.order_a.id, self.table_b.id)
        with self.assertRaises(NotFound):
            OrderService.create_order(self.context_a, table_id=self.table_b.id)

    def test_other_restaurants_order_item_is_not_found(self):
        order_b = OrderService.create_order(self.context_b)
        item_b, _ = OrderService.add_item(self.context_b, order_b.id, self.item_b.id)
        with self.assertRaises(NotFound):
            OrderService.remove_item(self.context_a, order_b.id, item_b.id)


class DailySummaryTest(TestCase):
    def setUp(self):
        _, self.restaurant, self.context = make_restaurant('owner@test.com', 'Bistro')
        self.item = make_menu_item(self.restaurant, price='50.00')

    def _order(self, quantity, status):
        order = OrderService.create_order(self.context)
        OrderService.add_item(self.context, order.id, self.item.id, quantity=quantity)
        return OrderService.transition_status(self.context, order.id, status)

    def test_summary(self):
        self._order(2, Order.COMPLETED)
        self._order(1, Order.COMPLETED)
        self._order(3, Order.CANCELLED)
        self._order(1, Order.PREPARING)

        summary = POSAnalyticsService.get_daily_summary(self.context)

        self.assertEqual(summary['total_orders'], 4)
        self.assertEqual(summary['completed_orders'], 2)
        self.assertEqual(summary['cancelled_orders'], 1)
        self.assertEqual(summary['total_sales'], Decimal('150.00'))
        self.assertEqual(summary['average_order_value'], Decimal('75.00'))
        self.assertEqual(summary['total_sales_display'], '₱150.00')
        self.assertEqual(len(summary['recent_orders']), 4)

    def test_empty_day(self):
        summary = POSAnalyticsService.get_daily_summary(self.context)
        self.assertEqual(summary['total_orders'], 0)
        self.assertEqual(summary['total_sales'], Decimal('0.00'))
        self.assertEqual(summary['average_order_value'], Decimal('0.00'))

    def test_orders_from_yesterday_are_excluded(self):
        today_order = self._order(1, Order.COMPLETED)
        yesterday_order = self._order(4, Order.COMPLETED)
        now = timezone.now()
        start, _ = get_today_range(now)
        Order.objects.filter(id=yesterday_order.id).update(created_at=start - timedelta(hours=1))

        summary = POSAnalyticsService.get_daily_summary(self.context, now=now)

        self.assertEqual(summary['total_orders'], 1)
        self.assertEqual(summary['completed_orders'], 1)
        self.assertEqual(summary['total_sales'], Decimal('50.00'))
        self.assertEqual([o.id for o in summary['recent_orders']], [today_order.id])
