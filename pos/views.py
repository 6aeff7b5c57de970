from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.mixins import RestaurantScopedMixin
from core.permissions import IsRestaurantMember, get_restaurant_context
from .models import Table, Order
from .serializers import (
    AddItemSerializer, AssignTableSerializer, CancelOrderSerializer, DashboardSerializer,
    OrderCreateSerializer, OrderItemSerializer, OrderListSerializer, OrderSerializer,
    OrderUpdateSerializer, SetStatusSerializer, TableSerializer,
)
from .services import OrderService, POSAnalyticsService


class TableViewSet(RestaurantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing dining tables

    Endpoints:
    - GET /api/restaurants/{rid}/tables/ - List all tables
    - POST /api/restaurants/{rid}/tables/ - Create new table
    - GET /api/restaurants/{rid}/tables/{id}/ - Get table details
    - PATCH /api/restaurants/{rid}/tables/{id}/ - Update table
    - DELETE /api/restaurants/{rid}/tables/{id}/ - Delete table
    """
    queryset = Table.objects.all()
    serializer_class = TableSerializer
    permission_classes = [IsAuthenticated, IsRestaurantMember]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status']
    ordering_fields = ['name', 'capacity', 'status']
    ordering = ['name']


class OrderViewSet(RestaurantScopedMixin,
                   mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    ViewSet for managing POS orders

    Endpoints:
    - GET /api/restaurants/{rid}/orders/ - List orders
    - POST /api/restaurants/{rid}/orders/ - Create order
    - GET /api/restaurants/{rid}/orders/{id}/ - Get order details with items
    - PATCH /api/restaurants/{rid}/orders/{id}/ - Update notes
    - POST /api/restaurants/{rid}/orders/{id}/items/ - Add item to order
    - DELETE /api/restaurants/{rid}/orders/{id}/items/{item_id}/ - Remove item
    - POST /api/restaurants/{rid}/orders/{id}/set_status/ - Change status
    - POST /api/restaurants/{rid}/orders/{id}/assign_table/ - Assign or clear table
    - POST /api/restaurants/{rid}/orders/{id}/cancel/ - Cancel order

    Orders are never deleted.
    """
    queryset = Order.objects.select_related('table', 'created_by')
    permission_classes = [IsAuthenticated, IsRestaurantMember]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status', 'table']
    ordering_fields = ['created_at', 'total_amount', 'status']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('items__menu_item')
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return OrderListSerializer
        return OrderSerializer

    def _detail(self, order):
        order = Order.objects.prefetch_related('items__menu_item').select_related('table', 'created_by').get(pk=order.pk)
        return OrderSerializer(order).data

    @extend_schema(request=OrderCreateSerializer, responses=OrderSerializer)
    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.create_order(
            self.restaurant_context,
            notes=serializer.validated_data.get('notes'),
            table_id=serializer.validated_data.get('table'),
        )
        return Response(self._detail(order), status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderUpdateSerializer, responses=OrderSerializer)
    def partial_update(self, request, *args, **kwargs):
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.update_notes(self.restaurant_context, kwargs['pk'], serializer.validated_data['notes'])
        return Response(self._detail(order))

    @extend_schema(request=AddItemSerializer, responses=OrderItemSerializer)
    @action(detail=True, methods=['post'])
    def items(self, request, restaurant_id=None, pk=None):
        """Add item to order"""
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        item, order = OrderService.add_item(
            self.restaurant_context,
            pk,
            data['menu_item_id'],
            quantity=data.get('quantity', 1),
            notes=data.get('notes'),
        )
        return Response({
            'item': OrderItemSerializer(item).data,
            'total_amount': str(order.total_amount),
        }, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses=OrderSerializer)
    @action(detail=True, methods=['delete'], url_path=r'items/(?P<item_id>[0-9a-f-]+)')
    def remove_item(self, request, restaurant_id=None, pk=None, item_id=None):
        """Remove item from order"""
        order = OrderService.remove_item(self.restaurant_context, pk, item_id)
        return Response(self._detail(order))

    @extend_schema(request=SetStatusSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'])
    def set_status(self, request, restaurant_id=None, pk=None):
        serializer = SetStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.transition_status(self.restaurant_context, pk, serializer.validated_data['status'])
        return Response(self._detail(order))

    @extend_schema(request=AssignTableSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'])
    def assign_table(self, request, restaurant_id=None, pk=None):
        serializer = AssignTableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.assign_table(self.restaurant_context, pk, serializer.validated_data['table'])
        return Response(self._detail(order))

    @extend_schema(request=CancelOrderSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'])
    def cancel(self, request, restaurant_id=None, pk=None):
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.cancel(self.restaurant_context, pk)
        return Response(self._detail(order))


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, IsRestaurantMember]

    @extend_schema(responses=DashboardSerializer)
    def get(self, request, restaurant_id):
        summary = POSAnalyticsService.get_daily_summary(get_restaurant_context(request, self))
        return Response(DashboardSerializer(summary).data)
