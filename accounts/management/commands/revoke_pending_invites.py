"""
Revoke all pending invitations of a restaurant so a fresh invite can be sent.

Usage:
  python manage.py revoke_pending_invites <restaurant_id>
"""
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import Invitation, Restaurant


class Command(BaseCommand):
    help = 'Revoke all pending invitations for a restaurant.'

    def add_arguments(self, parser):
        parser.add_argument('restaurant_id', type=str, help='Restaurant UUID')

    def handle(self, *args, **options):
        restaurant_id = options['restaurant_id'].strip()
        try:
            restaurant = Restaurant.objects.get(id=restaurant_id)
        except (Restaurant.DoesNotExist, ValidationError, ValueError):
            raise CommandError(f'Restaurant not found: "{restaurant_id}"')

        with transaction.atomic():
            revoked = Invitation.objects.filter(
                restaurant=restaurant,
                status=Invitation.STATUS_PENDING,
            ).update(status=Invitation.STATUS_REVOKED)

        self.stdout.write(
            self.style.SUCCESS(
                f'Revoked {revoked} pending invitation(s) for "{restaurant.name}". '
                f'You can do a fresh invite now.'
            )
        )
