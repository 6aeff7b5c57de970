from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import TableViewSet, OrderViewSet, DashboardView

# SimpleRouter: no API root view, the restaurant detail already owns that path
router = SimpleRouter()
router.register(r'tables', TableViewSet, basename='pos-table')
router.register(r'orders', OrderViewSet, basename='pos-order')

urlpatterns = [
    path('', include(router.urls)),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
]
