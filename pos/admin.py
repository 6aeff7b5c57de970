from django.contrib import admin
from django.utils.html import format_html
from .models import Table, Order, OrderItem


STATUS_COLORS = {
    Table.AVAILABLE: '#28a745',
    Table.OCCUPIED: '#ffc107',
    Table.RESERVED: '#0dcaf0',
    Table.OUT_OF_SERVICE: '#dc3545',
    Order.PENDING: '#6c757d',
    Order.CONFIRMED: '#0d6efd',
    Order.PREPARING: '#fd7e14',
    Order.READY: '#20c997',
    Order.SERVED: '#0dcaf0',
    Order.COMPLETED: '#28a745',
    Order.CANCELLED: '#dc3545',
}


def colored_status(obj):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
        STATUS_COLORS.get(obj.status, '#6c757d'),
        obj.get_status_display()
    )


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['name', 'capacity', 'status_colored', 'restaurant']
    list_filter = ['status', 'restaurant']
    search_fields = ['name', 'restaurant__name']

    def status_colored(self, obj):
        return colored_status(obj)
    status_colored.short_description = 'Status'


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['menu_item', 'quantity', 'unit_price', 'subtotal', 'notes', 'created_at']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'restaurant', 'status_colored', 'table', 'total_amount', 'created_by', 'created_at']
    list_filter = ['status', 'restaurant', 'created_at']
    search_fields = ['id', 'notes', 'restaurant__name']
    readonly_fields = ['total_amount', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    def status_colored(self, obj):
        return colored_status(obj)
    status_colored.short_description = 'Status'

    def has_delete_permission(self, request, obj=None):
        return False
