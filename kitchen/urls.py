from django.urls import path
from .views import AdvanceOrderView, KitchenBoardView

urlpatterns = [
    path('', KitchenBoardView.as_view(), name='kitchen-board'),
    path('<uuid:order_id>/advance/', AdvanceOrderView.as_view(), name='kitchen-advance'),
]
