from dataclasses import dataclass

from .models import RestaurantUser

ROLE_RANKS = {
    RestaurantUser.MEMBER: 0,
    RestaurantUser.STAFF: 1,
    RestaurantUser.OWNER: 2,
}


@dataclass(frozen=True)
class RestaurantContext:
    """Who is acting, in which restaurant, with which role. Built once per request."""
    restaurant: object
    user: object
    role: str

    @property
    def restaurant_id(self):
        return self.restaurant.id

    @property
    def is_owner(self):
        return self.role == RestaurantUser.OWNER

    def has_role(self, required_role):
        return ROLE_RANKS.get(self.role, -1) >= ROLE_RANKS[required_role]
