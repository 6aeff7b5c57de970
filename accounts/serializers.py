from django.contrib.auth import password_validation
from rest_framework import serializers

from .models import CustomUser, Invitation, Restaurant, RestaurantUser


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'first_name', 'last_name']
        read_only_fields = ['id', 'email']


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    invite_token = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, value):
        value = value.strip().lower()
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def validate_password(self, value):
        password_validation.validate_password(value)
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class RestaurantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Restaurant
        fields = ['id', 'name', 'currency', 'address', 'settings', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']


class RestaurantUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    currency = serializers.CharField(required=False, allow_blank=True, max_length=10)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    settings = serializers.JSONField(required=False)


class MembershipSerializer(serializers.ModelSerializer):
    restaurant_id = serializers.UUIDField(source='restaurant.id', read_only=True)
    restaurant_name = serializers.CharField(source='restaurant.name', read_only=True)

    class Meta:
        model = RestaurantUser
        fields = ['id', 'restaurant_id', 'restaurant_name', 'role', 'created_at']


class StaffMemberSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    email = serializers.EmailField(allow_null=True)
    role = serializers.CharField()
    created_at = serializers.DateTimeField()


class AddStaffSerializer(serializers.Serializer):
    email = serializers.EmailField()


class InvitationSerializer(serializers.ModelSerializer):
    """Owner-facing view of an invitation; the token is never exposed"""
    status = serializers.CharField(source='effective_status', read_only=True)

    class Meta:
        model = Invitation
        fields = [
            'id', 'email', 'role', 'status', 'delivery_status', 'expires_at',
            'created_at', 'accepted_at',
        ]
        read_only_fields = fields


class InviteStaffSerializer(serializers.Serializer):
    # Format is validated by the service so the error code stays stable
    email = serializers.CharField(max_length=254)


class ResolvedInvitationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    restaurant_id = serializers.UUIDField()
    restaurant_name = serializers.CharField()
    has_account = serializers.BooleanField()


class AcceptInvitationSerializer(serializers.Serializer):
    token = serializers.CharField()
