from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsRestaurantMember, get_restaurant_context
from pos.serializers import KitchenOrderSerializer
from pos.services import OrderService


def board_payload(context):
    """Board orders plus the interval clients should poll at"""
    orders = OrderService.kitchen_board(context)
    return {
        'refresh_interval_seconds': settings.KITCHEN_REFRESH_INTERVAL_SECONDS,
        'orders': KitchenOrderSerializer(orders, many=True).data,
    }


class KitchenBoardView(APIView):
    """
    Orders in confirmed, preparing, ready or served, oldest first.
    There is no push channel; clients re-fetch every refresh_interval_seconds.
    """
    permission_classes = [IsAuthenticated, IsRestaurantMember]

    def get(self, request, restaurant_id):
        return Response(board_payload(get_restaurant_context(request, self)))


class AdvanceOrderView(APIView):
    permission_classes = [IsAuthenticated, IsRestaurantMember]

    @extend_schema(request=None, responses=KitchenOrderSerializer)
    def post(self, request, restaurant_id, order_id):
        order = OrderService.advance(get_restaurant_context(request, self), order_id)
        return Response(KitchenOrderSerializer(order).data)
