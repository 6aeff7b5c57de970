"""
Utility functions for Restoe
"""
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

CURRENCY_SYMBOLS = {
    'PHP': '₱',
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
}

TWO_PLACES = Decimal('0.01')


def quantize_money(amount):
    """Round to two decimal places, half up"""
    return Decimal(amount or 0).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_currency(amount, currency='PHP'):
    """Format amount as currency"""
    amount = quantize_money(amount)
    symbol = CURRENCY_SYMBOLS.get((currency or '').upper())
    if symbol:
        return f"{symbol}{amount:,.2f}"
    return f"{amount:,.2f} {currency}"


def get_today_range(now=None):
    """Start and end of the current local day as aware datetimes"""
    now = timezone.localtime(now or timezone.now())
    start = timezone.make_aware(datetime.combine(now.date(), time.min), now.tzinfo)
    return start, start + timedelta(days=1)
