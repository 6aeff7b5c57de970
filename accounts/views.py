import logging

from django.contrib.auth import authenticate
from django.db import transaction
from drf_spectacular.utils import extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import EmailMismatch, Unauthenticated
from core.permissions import IsRestaurantOwner, IsRestaurantOwnerForWrites, get_restaurant_context
from .models import CustomUser
from .serializers import (
    AddStaffSerializer, InvitationSerializer, LoginSerializer, LogoutSerializer,
    MembershipSerializer, RestaurantSerializer, RestaurantUpdateSerializer,
    SignupSerializer, StaffMemberSerializer, UserSerializer,
)
from .services import MembershipService, invitation_service, normalize_email

logger = logging.getLogger(__name__)


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class SignupView(APIView):
    """
    Create an account. With `invite_token` the new account also redeems the
    invitation, so the invited user lands directly in the restaurant.
    """
    permission_classes = [permissions.AllowAny]

    @extend_schema(request=SignupSerializer)
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        invite_token = data.get('invite_token')

        if invite_token:
            resolved = invitation_service.resolve(invite_token)
            if normalize_email(resolved.email) != data['email']:
                raise EmailMismatch()

        with transaction.atomic():
            user = CustomUser.objects.create_user(
                email=data['email'],
                password=data['password'],
                first_name=data.get('first_name', ''),
                last_name=data.get('last_name', ''),
            )
            restaurant_id = invitation_service.accept(invite_token, user) if invite_token else None

        logger.info("User %s signed up", user.email)
        return Response({
            'user': UserSerializer(user).data,
            'tokens': _token_pair(user),
            'restaurant_id': restaurant_id,
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(request=LoginSerializer)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            email=normalize_email(serializer.validated_data['email']),
            password=serializer.validated_data['password'],
        )
        if user is None:
            logger.warning("Failed login for %s", serializer.validated_data['email'])
            raise Unauthenticated('Invalid credentials.')

        return Response({
            'user': UserSerializer(user).data,
            **_token_pair(user),
        })


class LogoutView(APIView):
    """Sign out by blacklisting the refresh token"""
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(request=LogoutSerializer)
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data['refresh']).blacklist()
        except TokenError:
            raise ValidationError({'refresh': ['Invalid refresh token.']})
        return Response(status=status.HTTP_205_RESET_CONTENT)


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class MembershipListView(APIView):
    """
    Restaurants the caller belongs to, plus where the client should go next
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        memberships = list(MembershipService.list_memberships(request.user))
        if memberships:
            redirect_to = f"/r/{memberships[0].restaurant_id}"
        else:
            redirect_to = '/create-restaurant'
        return Response({
            'memberships': MembershipSerializer(memberships, many=True).data,
            'redirect_to': redirect_to,
        })


class RestaurantCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(request=RestaurantSerializer, responses=RestaurantSerializer)
    def post(self, request):
        serializer = RestaurantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        restaurant = MembershipService.create_restaurant(
            request.user,
            data.get('name'),
            currency=data.get('currency'),
            address=data.get('address'),
            settings_data=data.get('settings'),
        )
        return Response(RestaurantSerializer(restaurant).data, status=status.HTTP_201_CREATED)


class RestaurantDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwnerForWrites]

    @extend_schema(responses=RestaurantSerializer)
    def get(self, request, restaurant_id):
        context = get_restaurant_context(request, self)
        data = RestaurantSerializer(context.restaurant).data
        data['role'] = context.role
        return Response(data)

    @extend_schema(request=RestaurantUpdateSerializer, responses=RestaurantSerializer)
    def patch(self, request, restaurant_id):
        serializer = RestaurantUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        restaurant = MembershipService.update_restaurant(
            get_restaurant_context(request, self), **serializer.validated_data
        )
        return Response(RestaurantSerializer(restaurant).data)


class StaffView(APIView):
    """Owner's staff page: roster and pending invitations, direct add"""
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwner]

    def get(self, request, restaurant_id):
        context = get_restaurant_context(request, self)
        roster = MembershipService.list_staff(context)
        pending = invitation_service.list_pending(context)
        return Response({
            'staff': StaffMemberSerializer(roster, many=True).data,
            'pending_invitations': InvitationSerializer(pending, many=True).data,
        })

    @extend_schema(request=AddStaffSerializer)
    def post(self, request, restaurant_id):
        serializer = AddStaffSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        membership = MembershipService.add_existing_staff(
            get_restaurant_context(request, self), serializer.validated_data['email']
        )
        return Response({
            'id': membership.id,
            'user_id': membership.user_id,
            'role': membership.role,
        }, status=status.HTTP_201_CREATED)


class StaffMemberView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwner]

    def delete(self, request, restaurant_id, membership_id):
        MembershipService.remove_staff(get_restaurant_context(request, self), membership_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
