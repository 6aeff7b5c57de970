from django.db import models
from django.conf import settings
from django.db.models import Sum
import uuid
from decimal import Decimal


class Table(models.Model):
    """Represents a physical dining table in the restaurant"""
    AVAILABLE = 'available'
    OCCUPIED = 'occupied'
    RESERVED = 'reserved'
    OUT_OF_SERVICE = 'out_of_service'
    STATUS_CHOICES = (
        (AVAILABLE, 'Available'),
        (OCCUPIED, 'Occupied'),
        (RESERVED, 'Reserved'),
        (OUT_OF_SERVICE, 'Out of service'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    restaurant = models.ForeignKey('accounts.Restaurant', on_delete=models.CASCADE, related_name='tables')
    name = models.CharField(max_length=100)
    capacity = models.IntegerField(default=4)  # Number of seats
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        db_table = 'pos_tables'

    def __str__(self):
        return f"{self.name} ({self.status})"


class Order(models.Model):
    """Represents a customer order in the POS system"""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    PREPARING = 'preparing'
    READY = 'ready'
    SERVED = 'served'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (PREPARING, 'Preparing'),
        (READY, 'Ready'),
        (SERVED, 'Served'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    )
    TERMINAL_STATUSES = (COMPLETED, CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    restaurant = models.ForeignKey('accounts.Restaurant', on_delete=models.CASCADE, related_name='orders')
    table = models.ForeignKey(Table, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        db_table = 'pos_orders'
        indexes = [
            models.Index(fields=['restaurant', 'created_at'], name='order_restaurant_created'),
            models.Index(fields=['restaurant', 'status'], name='order_restaurant_status'),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.status}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def calculate_total(self):
        """Sum of item subtotals; does not save"""
        total = self.items.aggregate(total=Sum('subtotal'))['total'] or Decimal('0.00')
        return Decimal(total).quantize(Decimal('0.01'))


class OrderItem(models.Model):
    """A menu item on an order, priced at the moment it was added"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey('menu.MenuItem', on_delete=models.PROTECT, related_name='order_items')
    quantity = models.IntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
        db_table = 'pos_order_items'

    def __str__(self):
        return f"{self.quantity}x {self.menu_item.name}"
