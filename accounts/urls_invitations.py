from django.urls import path

from .views_invitations import AcceptInvitationView, ResolveInvitationView

urlpatterns = [
    path('accept/', AcceptInvitationView.as_view(), name='invitation_accept'),
    path('<str:token>/', ResolveInvitationView.as_view(), name='invitation_resolve'),
]
