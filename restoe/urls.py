"""
URL configuration for the restoe project.

Everything restaurant-scoped lives under /api/restaurants/<restaurant_id>/;
the id in the path selects the tenant for the request.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

restaurant_prefix = 'api/restaurants/<uuid:restaurant_id>/'

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),  # Auth endpoints
    path('api/invitations/', include('accounts.urls_invitations')),  # Invitation redemption
    path('api/restaurants/', include('accounts.urls_restaurants')),  # Restaurants, staff, invitations
    path(restaurant_prefix + 'menu/', include('menu.urls')),  # Menu
    path(restaurant_prefix + 'kitchen/', include('kitchen.urls')),  # Kitchen board
    path(restaurant_prefix, include('pos.urls')),  # Tables, orders, dashboard
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='docs'),
]
