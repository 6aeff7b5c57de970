from rest_framework import serializers

from core.exceptions import InvalidPrice
from .models import MenuCategory, MenuItem


class MenuCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuCategory
        fields = ['id', 'name', 'description', 'is_active', 'display_order', 'created_at', 'updated_at']
        read_only_fields = ('display_order', 'created_at', 'updated_at')

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please enter a category name.")
        return value


class MenuItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'category_name', 'name', 'description', 'price',
            'is_available', 'display_order', 'created_at', 'updated_at',
        ]
        read_only_fields = ('display_order', 'created_at', 'updated_at')

    def get_fields(self):
        fields = super().get_fields()
        restaurant = self.context.get('restaurant')
        if restaurant is not None:
            # Categories of other restaurants are not valid choices
            fields['category'].queryset = MenuCategory.objects.filter(restaurant=restaurant)
        return fields

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please enter an item name.")
        return value

    def validate_price(self, value):
        if value < 0:
            raise InvalidPrice()
        return value
