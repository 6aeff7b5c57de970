"""
Membership and invitation services

Handles:
- Restaurant creation and membership resolution
- Role gating for restaurant-scoped actions
- Staff roster management
- Staff invitations (issue, resolve, accept, revoke, resend)
"""
import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import send_mail
from django.core.validators import validate_email
from django.db import transaction, IntegrityError
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags
from rest_framework.exceptions import ValidationError

from core.exceptions import (
    AlreadyMember, AlreadyUsed, CannotRemoveOwner, EmailDeliveryFailed,
    EmailMismatch, Expired, Forbidden, NotFound, RateLimited, Unauthenticated,
)
from .context import RestaurantContext
from .models import CustomUser, Invitation, Restaurant, RestaurantUser
from .tokens import get_token_generator

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or '').strip().lower()


def lookup_user_by_email(email):
    """Accounts whose email matches, case-insensitively: [{id, email}]"""
    email = normalize_email(email)
    if not email:
        return []
    return list(CustomUser.objects.filter(email__iexact=email).values('id', 'email'))


def get_user_emails_by_ids(user_ids):
    return [
        {'user_id': row['id'], 'email': row['email']}
        for row in CustomUser.objects.filter(id__in=list(user_ids)).values('id', 'email')
    ]


def _is_authenticated(user):
    return user is not None and getattr(user, 'is_authenticated', False)


class MembershipService:
    """Restaurants, memberships and role checks"""

    @staticmethod
    def create_restaurant(actor, name, currency=None, address=None, settings_data=None):
        """Create a restaurant; the actor becomes its first owner in the same transaction"""
        if not _is_authenticated(actor):
            raise Unauthenticated('You must be logged in to create a restaurant.')

        name = (name or '').strip()
        if not name:
            raise ValidationError({'name': ['Please enter a restaurant name.']})

        with transaction.atomic():
            restaurant = Restaurant.objects.create(
                name=name,
                currency=(currency or '').strip() or settings.DEFAULT_CURRENCY,
                address=(address or '').strip() or None,
                settings=settings_data or {},
                created_by=actor,
            )
            RestaurantUser.objects.create(
                restaurant=restaurant,
                user=actor,
                role=RestaurantUser.OWNER,
            )

        logger.info("Restaurant %s created by %s", restaurant.id, actor.email)
        return restaurant

    @staticmethod
    def update_restaurant(context, **fields):
        MembershipService.require_role(context, RestaurantUser.OWNER)

        restaurant = context.restaurant
        if 'name' in fields:
            name = (fields['name'] or '').strip()
            if not name:
                raise ValidationError({'name': ['Please enter a restaurant name.']})
            restaurant.name = name
        if 'currency' in fields:
            restaurant.currency = (fields['currency'] or '').strip() or settings.DEFAULT_CURRENCY
        if 'address' in fields:
            restaurant.address = (fields['address'] or '').strip() or None
        if 'settings' in fields:
            restaurant.settings = fields['settings'] or {}

        restaurant.save()
        logger.info("Restaurant %s updated by %s", restaurant.id, context.user.email)
        return restaurant

    @staticmethod
    def list_memberships(user):
        if not _is_authenticated(user):
            raise Unauthenticated()
        return (
            RestaurantUser.objects
            .filter(user=user)
            .select_related('restaurant')
            .order_by('restaurant__name')
        )

    @staticmethod
    def resolve_context(user, restaurant_id):
        if not _is_authenticated(user):
            raise Unauthenticated()

        try:
            restaurant = Restaurant.objects.get(id=restaurant_id)
        except (Restaurant.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound('Restaurant not found.')

        membership = RestaurantUser.objects.filter(restaurant=restaurant, user=user).first()
        if membership is None:
            raise Forbidden('You are not a member of this restaurant.')

        return RestaurantContext(restaurant=restaurant, user=user, role=membership.role)

    @staticmethod
    def require_role(context, role):
        if not context.has_role(role):
            raise Forbidden(f"This action requires the {role} role.")

    @staticmethod
    def list_staff(context):
        """Roster for the owner's staff page, with each member's email"""
        MembershipService.require_role(context, RestaurantUser.OWNER)

        memberships = list(
            RestaurantUser.objects
            .filter(restaurant=context.restaurant)
            .order_by('-created_at')
        )
        emails = {
            row['user_id']: row['email']
            for row in get_user_emails_by_ids(m.user_id for m in memberships)
        }
        return [
            {
                'id': m.id,
                'user_id': m.user_id,
                'email': emails.get(m.user_id),
                'role': m.role,
                'created_at': m.created_at,
            }
            for m in memberships
        ]

    @staticmethod
    def remove_staff(context, membership_id):
        MembershipService.require_role(context, RestaurantUser.OWNER)

        try:
            membership = RestaurantUser.objects.get(id=membership_id, restaurant=context.restaurant)
        except (RestaurantUser.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound('Staff member not found.')

        if membership.role == RestaurantUser.OWNER:
            raise CannotRemoveOwner()

        membership.delete()
        logger.info(
            "Membership %s removed from restaurant %s by %s",
            membership_id, context.restaurant_id, context.user.email
        )

    @staticmethod
    def add_existing_staff(context, email):
        """Add a user who already has an account as staff, without an invitation"""
        MembershipService.require_role(context, RestaurantUser.OWNER)

        matches = lookup_user_by_email(email)
        if not matches:
            raise NotFound('User not found. Please ensure the user has an account.')
        target_id = matches[0]['id']

        if RestaurantUser.objects.filter(restaurant=context.restaurant, user_id=target_id).exists():
            raise AlreadyMember()

        try:
            with transaction.atomic():
                membership = RestaurantUser.objects.create(
                    restaurant=context.restaurant,
                    user_id=target_id,
                    role=RestaurantUser.STAFF,
                )
        except IntegrityError:
            # lost a race with another add or an invitation accept
            raise AlreadyMember()

        logger.info("User %s added as staff to restaurant %s", target_id, context.restaurant_id)
        return membership


@dataclass(frozen=True)
class ResolvedInvitation:
    email: str
    restaurant_id: object
    restaurant_name: str
    has_account: bool


class InvitationService:
    """Issue, resolve, accept and revoke staff invitations"""

    def __init__(self, token_generator=None, clock=None):
        self._token_generator = token_generator
        self.clock = clock or timezone.now

    @property
    def token_generator(self):
        if self._token_generator is None:
            self._token_generator = get_token_generator()
        return self._token_generator

    def issue(self, context, email):
        """
        Create a pending invitation and email its redemption link.

        The token is only ever sent by email; callers get the row back for
        logging but the API answers with a bare success flag.
        """
        MembershipService.require_role(context, RestaurantUser.OWNER)

        email = normalize_email(email)
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError({'email': ['Invalid email format.']})

        now = self.clock()
        window_start = now - timedelta(seconds=settings.INVITATION_RATE_LIMIT_SECONDS)

        with transaction.atomic():
            recently_sent = Invitation.objects.filter(
                restaurant=context.restaurant,
                email=email,
                status=Invitation.STATUS_PENDING,
                created_at__gte=window_start,
            ).exists()
            if recently_sent:
                raise RateLimited()

            invitation = Invitation.objects.create(
                restaurant=context.restaurant,
                email=email,
                role=RestaurantUser.STAFF,
                token=self._new_token(),
                status=Invitation.STATUS_PENDING,
                invited_by=context.user,
                created_at=now,
                expires_at=now + timedelta(days=settings.INVITATION_EXPIRY_DAYS),
            )

        logger.info("Invitation %s issued for restaurant %s", invitation.id, context.restaurant_id)

        # The row is committed before sending; a failed send leaves it pending
        # and marked as failed so the owner can resend.
        self._deliver(invitation)
        return invitation

    def resolve(self, token):
        invitation = self._get_by_token(token, Invitation.objects.select_related('restaurant'))
        self._check_redeemable(invitation)
        return ResolvedInvitation(
            email=invitation.email,
            restaurant_id=invitation.restaurant_id,
            restaurant_name=invitation.restaurant.name,
            has_account=bool(lookup_user_by_email(invitation.email)),
        )

    def accept(self, token, actor):
        """
        Redeem an invitation for the logged-in actor.

        Runs as one transaction with the invitation row locked; the status
        flip is a conditional UPDATE so only one concurrent accept can win.
        Returns the restaurant id.
        """
        if not _is_authenticated(actor):
            raise Unauthenticated()

        now = self.clock()
        with transaction.atomic():
            invitation = self._get_by_token(token, Invitation.objects.select_for_update())
            self._check_redeemable(invitation, now)

            if normalize_email(actor.email) != normalize_email(invitation.email):
                raise EmailMismatch()

            updated = Invitation.objects.filter(
                pk=invitation.pk, status=Invitation.STATUS_PENDING
            ).update(
                status=Invitation.STATUS_ACCEPTED,
                accepted_at=now,
                accepted_by=actor,
            )
            if not updated:
                raise AlreadyUsed()

            RestaurantUser.objects.get_or_create(
                restaurant_id=invitation.restaurant_id,
                user=actor,
                defaults={'role': invitation.role},
            )

        logger.info("Invitation %s accepted by %s", invitation.id, actor.email)
        return invitation.restaurant_id

    def revoke(self, context, invitation_id):
        MembershipService.require_role(context, RestaurantUser.OWNER)
        invitation = self._get_for_restaurant(context, invitation_id)

        updated = Invitation.objects.filter(
            pk=invitation.pk, status=Invitation.STATUS_PENDING
        ).update(status=Invitation.STATUS_REVOKED)
        if not updated:
            raise AlreadyUsed()

        logger.info("Invitation %s revoked by %s", invitation.id, context.user.email)
        invitation.refresh_from_db()
        return invitation

    def resend(self, context, invitation_id):
        MembershipService.require_role(context, RestaurantUser.OWNER)
        invitation = self._get_for_restaurant(context, invitation_id)
        self._check_redeemable(invitation)
        self._deliver(invitation)
        return invitation

    def list_pending(self, context):
        return Invitation.objects.filter(
            restaurant=context.restaurant,
            status=Invitation.STATUS_PENDING,
            expires_at__gt=self.clock(),
        ).order_by('-created_at')

    def build_invite_url(self, invitation):
        path = 'accept-invitation' if lookup_user_by_email(invitation.email) else 'signup'
        return f"{settings.FRONTEND_URL.rstrip('/')}/{path}?invite={invitation.token}"

    def _new_token(self):
        for _ in range(5):
            token = self.token_generator.generate()
            if not Invitation.objects.filter(token=token).exists():
                return token
        raise RuntimeError("Could not generate a unique invitation token")

    def _get_by_token(self, token, queryset):
        if not token:
            raise NotFound('Invitation not found.')
        try:
            return queryset.get(token=token)
        except Invitation.DoesNotExist:
            raise NotFound('Invitation not found.')

    def _get_for_restaurant(self, context, invitation_id):
        try:
            return Invitation.objects.get(id=invitation_id, restaurant=context.restaurant)
        except (Invitation.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound('Invitation not found.')

    def _check_redeemable(self, invitation, now=None):
        if invitation.status != Invitation.STATUS_PENDING:
            raise AlreadyUsed()
        if invitation.is_expired(now or self.clock()):
            raise Expired()

    def _deliver(self, invitation):
        try:
            self._send_invitation_email(invitation)
        except Exception as e:
            logger.error("Failed to send invitation email for %s: %s", invitation.id, e)
            Invitation.objects.filter(pk=invitation.pk).update(delivery_status=Invitation.DELIVERY_FAILED)
            raise EmailDeliveryFailed() from e

        Invitation.objects.filter(pk=invitation.pk).update(delivery_status=Invitation.DELIVERY_SENT)

    def _send_invitation_email(self, invitation):
        restaurant_name = invitation.restaurant.name
        context = {
            'restaurant_name': restaurant_name,
            'invite_url': self.build_invite_url(invitation),
            'expiry_days': settings.INVITATION_EXPIRY_DAYS,
        }
        html_message = render_to_string('emails/invitation.html', context)

        send_mail(
            subject=f"You're invited to join {restaurant_name} on Restoe",
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invitation.email],
            html_message=html_message,
            fail_silently=False,
        )


invitation_service = InvitationService()
