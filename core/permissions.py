"""
Custom permission classes for Restoe

Restaurant-scoped views take the restaurant from the URL
(`restaurant_id` kwarg). The permission resolves the caller's membership
once and stores the resulting RestaurantContext on the request.
"""
from rest_framework import permissions

from accounts.models import RestaurantUser
from accounts.services import MembershipService


def get_restaurant_context(request, view):
    """Resolve (and cache on the request) the caller's RestaurantContext"""
    context = getattr(request, 'restaurant_context', None)
    if context is None:
        context = MembershipService.resolve_context(request.user, view.kwargs.get('restaurant_id'))
        request.restaurant_context = context
    return context


class HasRestaurantRole(permissions.BasePermission):
    """
    Caller must be a member of the URL's restaurant with at least `required_role`
    """
    required_role = RestaurantUser.MEMBER

    def has_permission(self, request, view):
        context = get_restaurant_context(request, view)
        MembershipService.require_role(context, self.required_role)
        return True


class IsRestaurantMember(HasRestaurantRole):
    required_role = RestaurantUser.MEMBER


class IsRestaurantStaff(HasRestaurantRole):
    required_role = RestaurantUser.STAFF


class IsRestaurantOwner(HasRestaurantRole):
    required_role = RestaurantUser.OWNER


class IsRestaurantOwnerForWrites(HasRestaurantRole):
    """
    Any member may read, only the owner may write
    """
    def has_permission(self, request, view):
        context = get_restaurant_context(request, view)
        if request.method not in permissions.SAFE_METHODS:
            MembershipService.require_role(context, RestaurantUser.OWNER)
        return True
