from django.urls import path
from .views import (
    MenuCategoryListCreateAPIView,
    MenuCategoryRetrieveUpdateAPIView,
    MenuItemListCreateAPIView,
    MenuItemRetrieveUpdateAPIView,
    MenuItemToggleAvailabilityView,
)

urlpatterns = [
    # Menu Categories
    path('categories/', MenuCategoryListCreateAPIView.as_view(), name='menu-category-list-create'),
    path('categories/<uuid:pk>/', MenuCategoryRetrieveUpdateAPIView.as_view(), name='menu-category-detail'),

    # Menu Items (can be filtered by category)
    path('items/', MenuItemListCreateAPIView.as_view(), name='menu-item-list-create'),
    path('items/<uuid:pk>/', MenuItemRetrieveUpdateAPIView.as_view(), name='menu-item-detail'),
    path(
        'items/<uuid:pk>/toggle_availability/',
        MenuItemToggleAvailabilityView.as_view(),
        name='menu-item-toggle-availability',
    ),
]
