import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFound
from core.mixins import RestaurantScopedMixin
from core.permissions import IsRestaurantMember, get_restaurant_context
from .models import MenuCategory, MenuItem, next_display_order
from .serializers import MenuCategorySerializer, MenuItemSerializer

logger = logging.getLogger(__name__)


class MenuCategoryListCreateAPIView(RestaurantScopedMixin, generics.ListCreateAPIView):
    queryset = MenuCategory.objects.all()
    serializer_class = MenuCategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsRestaurantMember]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['is_active']

    def get_queryset(self):
        return super().get_queryset().order_by('display_order', 'name')

    def perform_create(self, serializer):
        restaurant = self.restaurant_context.restaurant
        category = serializer.save(
            restaurant=restaurant,
            display_order=next_display_order(MenuCategory.objects.filter(restaurant=restaurant)),
        )
        logger.info("Menu category %s created in restaurant %s", category.id, restaurant.id)


class MenuCategoryRetrieveUpdateAPIView(RestaurantScopedMixin, generics.RetrieveUpdateAPIView):
    """Categories are deactivated (is_active=false), never deleted"""
    queryset = MenuCategory.objects.all()
    serializer_class = MenuCategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsRestaurantMember]
    lookup_field = 'pk'


class MenuItemListCreateAPIView(RestaurantScopedMixin, generics.ListCreateAPIView):
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    permission_classes = [permissions.IsAuthenticated, IsRestaurantMember]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['category', 'is_available']
    ordering_fields = ['display_order', 'name', 'price']
    ordering = ['category__display_order', 'display_order', 'name']

    def perform_create(self, serializer):
        restaurant = self.restaurant_context.restaurant
        category = serializer.validated_data['category']
        item = serializer.save(
            restaurant=restaurant,
            display_order=next_display_order(MenuItem.objects.filter(restaurant=restaurant, category=category)),
        )
        logger.info("Menu item %s created in restaurant %s", item.id, restaurant.id)


class MenuItemRetrieveUpdateAPIView(RestaurantScopedMixin, generics.RetrieveUpdateAPIView):
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    permission_classes = [permissions.IsAuthenticated, IsRestaurantMember]
    lookup_field = 'pk'


class MenuItemToggleAvailabilityView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantMember]

    @extend_schema(request=None, responses=MenuItemSerializer)
    def post(self, request, restaurant_id, pk):
        context = get_restaurant_context(request, self)
        try:
            item = MenuItem.objects.get(id=pk, restaurant=context.restaurant)
        except MenuItem.DoesNotExist:
            raise NotFound('Menu item not found.')

        item.is_available = not item.is_available
        item.save(update_fields=['is_available', 'updated_at'])
        logger.info("Menu item %s availability set to %s", item.id, item.is_available)
        return Response(MenuItemSerializer(item, context={'restaurant': context.restaurant}).data)
