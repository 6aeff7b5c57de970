"""
POS Service Layer - Business Logic for POS Operations
Handles orders, order items, status transitions, the kitchen board and analytics.

Every function takes the caller's RestaurantContext and only ever touches
rows of that restaurant; ids from another restaurant raise NotFound.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Avg, Count, Sum

from accounts.models import RestaurantUser
from accounts.services import MembershipService
from core.exceptions import (
    InvalidOrderStatus, InvalidQuantity, ItemUnavailable,
    NotFound, Unauthenticated,
)
from core.utils import format_currency, get_today_range, quantize_money
from menu.models import MenuItem
from .models import Order, OrderItem, Table

logger = logging.getLogger(__name__)

# Forward single steps plus cancellation from any non-terminal state.
# Only enforced when ORDER_STRICT_TRANSITIONS is on.
ALLOWED_TRANSITIONS = {
    Order.PENDING: {Order.CONFIRMED, Order.CANCELLED},
    Order.CONFIRMED: {Order.PREPARING, Order.CANCELLED},
    Order.PREPARING: {Order.READY, Order.CANCELLED},
    Order.READY: {Order.SERVED, Order.CANCELLED},
    Order.SERVED: {Order.COMPLETED, Order.CANCELLED},
    Order.COMPLETED: set(),
    Order.CANCELLED: set(),
}

KITCHEN_STATUSES = (Order.CONFIRMED, Order.PREPARING, Order.READY, Order.SERVED)

KITCHEN_NEXT_STATUS = {
    Order.CONFIRMED: Order.PREPARING,
    Order.PREPARING: Order.READY,
    Order.READY: Order.SERVED,
    Order.SERVED: Order.COMPLETED,
}

ORDER_STATUSES = {value for value, _ in Order.STATUS_CHOICES}

# Largest value a money column (max_digits=10, decimal_places=2) can hold
MAX_AMOUNT = Decimal('99999999.99')

# OrderItem.quantity is a 32-bit IntegerField
MAX_QUANTITY = 2147483647


def _require_actor(context):
    if context is None or context.user is None or not context.user.is_authenticated:
        raise Unauthenticated()
    MembershipService.require_role(context, RestaurantUser.MEMBER)


def _get_order(context, order_id, lock=False):
    queryset = Order.objects.filter(restaurant=context.restaurant)
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound('Order not found.')


def _get_table(context, table_id):
    try:
        return Table.objects.get(id=table_id, restaurant=context.restaurant)
    except (Table.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound('Table not found.')


def parse_quantity(value):
    """Whole number >= 1; numeric strings are accepted, fractions and bools are not"""
    if isinstance(value, bool):
        raise InvalidQuantity()
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip('-').isdigit():
            raise InvalidQuantity()
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise InvalidQuantity()
    if value > MAX_QUANTITY:
        raise InvalidQuantity('Quantity is too large.')
    return value


class OrderService:
    """Service for order lifecycle operations"""

    @staticmethod
    def create_order(context, notes=None, table_id=None):
        _require_actor(context)
        table = _get_table(context, table_id) if table_id else None

        order = Order.objects.create(
            restaurant=context.restaurant,
            status=Order.PENDING,
            total_amount=Decimal('0.00'),
            notes=notes or None,
            table=table,
            created_by=context.user,
        )
        logger.info("Order %s created in restaurant %s by %s", order.id, context.restaurant_id, context.user.email)
        return order

    @staticmethod
    def recalculate_total(order):
        """Recompute and store the order total from its items"""
        order.total_amount = order.calculate_total()
        order.save(update_fields=['total_amount', 'updated_at'])
        return order.total_amount

    @staticmethod
    def add_item(context, order_id, menu_item_id, quantity=1, notes=None):
        """
        Add a menu item to an order at the item's current price.

        The order row is locked for the duration so concurrent adds and
        removes on the same order cannot interleave their total updates.
        """
        _require_actor(context)
        quantity = parse_quantity(quantity)

        with transaction.atomic():
            order = _get_order(context, order_id, lock=True)
            try:
                menu_item = MenuItem.objects.get(id=menu_item_id, restaurant=context.restaurant)
            except (MenuItem.DoesNotExist, DjangoValidationError, ValueError):
                raise NotFound('Menu item not found.')

            if not menu_item.is_available:
                raise ItemUnavailable()

            unit_price = quantize_money(menu_item.price)
            subtotal = quantize_money(unit_price * quantity)
            if subtotal > MAX_AMOUNT or order.calculate_total() + subtotal > MAX_AMOUNT:
                raise InvalidQuantity('Quantity is too large for this order.')

            item = OrderItem.objects.create(
                order=order,
                menu_item=menu_item,
                quantity=quantity,
                unit_price=unit_price,
                subtotal=subtotal,
                notes=notes or None,
            )
            OrderService.recalculate_total(order)

        logger.info("Item %s (%sx %s) added to order %s", item.id, quantity, menu_item.name, order.id)
        return item, order

    @staticmethod
    def remove_item(context, order_id, item_id):
        _require_actor(context)

        with transaction.atomic():
            order = _get_order(context, order_id, lock=True)
            try:
                item = OrderItem.objects.get(
                    id=item_id, order=order, order__restaurant=context.restaurant
                )
            except (OrderItem.DoesNotExist, DjangoValidationError, ValueError):
                raise NotFound('Order item not found.')

            item.delete()
            OrderService.recalculate_total(order)

        logger.info("Item %s removed from order %s", item_id, order.id)
        return order

    @staticmethod
    def assign_table(context, order_id, table_id):
        _require_actor(context)
        order = _get_order(context, order_id)
        table = _get_table(context, table_id) if table_id else None

        if order.table_id == (table.id if table else None):
            return order

        order.table = table
        order.save(update_fields=['table', 'updated_at'])
        logger.info("Order %s assigned to table %s", order.id, table.id if table else None)
        return order

    @staticmethod
    def update_notes(context, order_id, notes):
        _require_actor(context)
        order = _get_order(context, order_id)
        order.notes = notes or None
        order.save(update_fields=['notes', 'updated_at'])
        return order

    @staticmethod
    def transition_status(context, order_id, new_status):
        _require_actor(context)
        if not isinstance(new_status, str) or new_status not in ORDER_STATUSES:
            raise InvalidOrderStatus(f"Unknown order status: {new_status}")

        with transaction.atomic():
            order = _get_order(context, order_id, lock=True)
            if settings.ORDER_STRICT_TRANSITIONS and new_status not in ALLOWED_TRANSITIONS[order.status]:
                raise InvalidOrderStatus(f"Cannot move order from {order.status} to {new_status}.")

            previous = order.status
            order.status = new_status
            order.save(update_fields=['status', 'updated_at'])

        logger.info("Order %s status %s -> %s by %s", order.id, previous, new_status, context.user.email)
        return order

    @staticmethod
    def cancel(context, order_id):
        return OrderService.transition_status(context, order_id, Order.CANCELLED)

    @staticmethod
    def kitchen_board(context):
        """Orders the kitchen is working on, oldest first, with their items"""
        _require_actor(context)
        return (
            Order.objects
            .filter(restaurant=context.restaurant, status__in=KITCHEN_STATUSES)
            .select_related('table')
            .prefetch_related('items__menu_item')
            .order_by('created_at')
        )

    @staticmethod
    def advance(context, order_id):
        """Move a board order one step along the kitchen sequence"""
        _require_actor(context)

        with transaction.atomic():
            order = _get_order(context, order_id, lock=True)
            next_status = KITCHEN_NEXT_STATUS.get(order.status)
            if next_status is None:
                raise InvalidOrderStatus(f"Order in status {order.status} is not on the kitchen board.")

            previous = order.status
            order.status = next_status
            order.save(update_fields=['status', 'updated_at'])

        logger.info("Order %s advanced %s -> %s by %s", order.id, previous, next_status, context.user.email)
        return order


class POSAnalyticsService:
    """Service for POS analytics and reporting"""

    @staticmethod
    def get_daily_summary(context, now=None, recent_limit=10):
        """Dashboard figures for the current day"""
        _require_actor(context)
        restaurant = context.restaurant
        start, end = get_today_range(now)

        today = Order.objects.filter(restaurant=restaurant, created_at__gte=start, created_at__lt=end)
        completed = today.filter(status=Order.COMPLETED)
        totals = completed.aggregate(sales=Sum('total_amount'), average=Avg('total_amount'), count=Count('id'))

        total_sales = quantize_money(totals['sales'] or 0)
        average = quantize_money(totals['average'] or 0)
        currency = restaurant.currency

        recent = (
            today
            .select_related('table')
            .order_by('-created_at')[:recent_limit]
        )

        return {
            'date': start.date().isoformat(),
            'currency': currency,
            'total_orders': today.count(),
            'completed_orders': totals['count'],
            'cancelled_orders': today.filter(status=Order.CANCELLED).count(),
            'total_sales': total_sales,
            'total_sales_display': format_currency(total_sales, currency),
            'average_order_value': average,
            'average_order_value_display': format_currency(average, currency),
            'recent_orders': list(recent),
        }
