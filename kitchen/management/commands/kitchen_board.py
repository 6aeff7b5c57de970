"""
Print a restaurant's kitchen board, refreshing on a fixed interval.

Usage:
  python manage.py kitchen_board <restaurant_id> --user chef@example.com
  python manage.py kitchen_board <restaurant_id> --user chef@example.com --once
"""
import time

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from accounts.models import CustomUser
from accounts.services import MembershipService
from kitchen.poller import KitchenBoardPoller
from kitchen.views import board_payload


class Command(BaseCommand):
    help = 'Show the kitchen board for a restaurant, refreshing every few seconds.'

    def add_arguments(self, parser):
        parser.add_argument('restaurant_id', type=str, help='Restaurant UUID')
        parser.add_argument('--user', required=True, help='Email of a member of the restaurant')
        parser.add_argument('--interval', type=float, default=None, help='Seconds between refreshes')
        parser.add_argument('--once', action='store_true', help='Print the board once and exit')

    def handle(self, *args, **options):
        try:
            user = CustomUser.objects.get(email__iexact=options['user'].strip())
        except CustomUser.DoesNotExist:
            raise CommandError(f'User not found: "{options["user"]}"')

        try:
            context = MembershipService.resolve_context(user, options['restaurant_id'])
        except APIException as e:
            raise CommandError(str(e.detail))

        poller = KitchenBoardPoller(
            fetch=lambda: board_payload(context),
            on_update=self.print_board,
            interval=options['interval'],
        )

        if options['once']:
            if poller.refresh_now() is None:
                raise CommandError(f'Could not load the kitchen board: {poller.last_error}')
            return

        poller.start()
        try:
            while poller.is_running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
        finally:
            poller.stop()

    def print_board(self, board):
        orders = board['orders']
        self.stdout.write(self.style.MIGRATE_HEADING(f'Kitchen board: {len(orders)} order(s)'))
        for order in orders:
            table = order['table_name'] or 'No table'
            self.stdout.write(f"[{order['status'].upper()}] {order['id']} - {table} - {order['created_at']}")
            for item in order['items']:
                line = f"    {item['quantity']}x {item['name']}"
                if item['notes']:
                    line += f" ({item['notes']})"
                self.stdout.write(line)
            if order['notes']:
                self.stdout.write(f"    Note: {order['notes']}")
        self.stdout.write('')
