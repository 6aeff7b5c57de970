from django.urls import path

from .views import RestaurantCreateView, RestaurantDetailView, StaffMemberView, StaffView
from .views_invitations import RestaurantInvitationsView, ResendInvitationView, RevokeInvitationView

urlpatterns = [
    path('', RestaurantCreateView.as_view(), name='restaurant_create'),
    path('<uuid:restaurant_id>/', RestaurantDetailView.as_view(), name='restaurant_detail'),
    path('<uuid:restaurant_id>/staff/', StaffView.as_view(), name='staff'),
    path('<uuid:restaurant_id>/staff/<uuid:membership_id>/', StaffMemberView.as_view(), name='staff_member'),
    path('<uuid:restaurant_id>/invitations/', RestaurantInvitationsView.as_view(), name='invitations'),
    path(
        '<uuid:restaurant_id>/invitations/<uuid:invitation_id>/revoke/',
        RevokeInvitationView.as_view(), name='invitation_revoke'
    ),
    path(
        '<uuid:restaurant_id>/invitations/<uuid:invitation_id>/resend/',
        ResendInvitationView.as_view(), name='invitation_resend'
    ),
]
