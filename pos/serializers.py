from rest_framework import serializers

from core.exceptions import InvalidCapacity
from .models import Table, Order, OrderItem


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'name', 'capacity', 'status', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please enter a table name.")
        return value

    def validate_capacity(self, value):
        """Capacity must be a positive number of seats"""
        if value <= 0:
            raise InvalidCapacity()
        return value


class OrderItemSerializer(serializers.ModelSerializer):
    menu_item_id = serializers.UUIDField(source='menu_item.id', read_only=True)
    name = serializers.CharField(source='menu_item.name', read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item_id', 'name', 'quantity', 'unit_price', 'subtotal', 'notes', 'created_at']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    table_name = serializers.CharField(source='table.name', read_only=True, default=None)
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'id', 'status', 'total_amount', 'table', 'table_name', 'notes',
            'created_by', 'created_by_email', 'items', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    table_name = serializers.CharField(source='table.name', read_only=True, default=None)

    class Meta:
        model = Order
        fields = ['id', 'status', 'total_amount', 'table', 'table_name', 'notes', 'created_at', 'updated_at']
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    table = serializers.UUIDField(required=False, allow_null=True)


class OrderUpdateSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, allow_null=True)


class AddItemSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    # Validated by the service so a bad quantity reports invalid_quantity
    quantity = serializers.JSONField(required=False, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class SetStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class AssignTableSerializer(serializers.Serializer):
    table = serializers.UUIDField(allow_null=True)


class CancelOrderSerializer(serializers.Serializer):
    confirm = serializers.BooleanField()

    def validate_confirm(self, value):
        if not value:
            raise serializers.ValidationError("Cancellation must be confirmed.")
        return value


class KitchenItemSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='menu_item.name', read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'name', 'quantity', 'notes']
        read_only_fields = fields


class KitchenOrderSerializer(serializers.ModelSerializer):
    items = KitchenItemSerializer(many=True, read_only=True)
    table_name = serializers.CharField(source='table.name', read_only=True, default=None)

    class Meta:
        model = Order
        fields = ['id', 'status', 'table', 'table_name', 'notes', 'items', 'created_at']
        read_only_fields = fields


class DashboardSerializer(serializers.Serializer):
    date = serializers.CharField()
    currency = serializers.CharField()
    total_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    cancelled_orders = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=None, decimal_places=2)
    total_sales_display = serializers.CharField()
    average_order_value = serializers.DecimalField(max_digits=None, decimal_places=2)
    average_order_value_display = serializers.CharField()
    recent_orders = OrderListSerializer(many=True)
