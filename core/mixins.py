"""
ViewSet mixins for restaurant-scoped resources
"""
from .permissions import get_restaurant_context


class RestaurantScopedMixin:
    """
    Filters querysets by the URL's restaurant and sets it on create.

    Rows of another restaurant never appear in the queryset, so a foreign
    id in the URL resolves to 404 like any unknown id.
    """

    @property
    def restaurant_context(self):
        return get_restaurant_context(self.request, self)

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, 'swagger_fake_view', False):
            return queryset.none()
        return queryset.filter(restaurant=self.restaurant_context.restaurant)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if not getattr(self, 'swagger_fake_view', False) and 'restaurant_id' in self.kwargs:
            context['restaurant'] = self.restaurant_context.restaurant
        return context

    def perform_create(self, serializer):
        serializer.save(restaurant=self.restaurant_context.restaurant)
