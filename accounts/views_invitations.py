"""
Staff invitation endpoints

Owners issue, revoke and resend invitations for their restaurant. The
redemption link carries the token; anyone holding it may resolve it, and
the invited (logged-in) user accepts it.
"""
from drf_spectacular.utils import extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsRestaurantOwner, get_restaurant_context
from .serializers import (
    AcceptInvitationSerializer, InvitationSerializer, InviteStaffSerializer,
    ResolvedInvitationSerializer,
)
from .services import invitation_service


class RestaurantInvitationsView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwner]

    @extend_schema(responses=InvitationSerializer(many=True))
    def get(self, request, restaurant_id):
        pending = invitation_service.list_pending(get_restaurant_context(request, self))
        return Response(InvitationSerializer(pending, many=True).data)

    @extend_schema(request=InviteStaffSerializer)
    def post(self, request, restaurant_id):
        serializer = InviteStaffSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invitation_service.issue(get_restaurant_context(request, self), serializer.validated_data['email'])
        # The token only travels by email
        return Response({'ok': True}, status=status.HTTP_201_CREATED)


class RevokeInvitationView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwner]

    @extend_schema(request=None, responses=InvitationSerializer)
    def post(self, request, restaurant_id, invitation_id):
        invitation = invitation_service.revoke(get_restaurant_context(request, self), invitation_id)
        return Response(InvitationSerializer(invitation).data)


class ResendInvitationView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsRestaurantOwner]

    @extend_schema(request=None)
    def post(self, request, restaurant_id, invitation_id):
        invitation_service.resend(get_restaurant_context(request, self), invitation_id)
        return Response({'ok': True})


class ResolveInvitationView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(responses=ResolvedInvitationSerializer)
    def get(self, request, token):
        resolved = invitation_service.resolve(token)
        return Response(ResolvedInvitationSerializer(resolved).data)


class AcceptInvitationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(request=AcceptInvitationSerializer)
    def post(self, request):
        serializer = AcceptInvitationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        restaurant_id = invitation_service.accept(serializer.validated_data['token'], request.user)
        return Response({'ok': True, 'restaurant_id': restaurant_id})
