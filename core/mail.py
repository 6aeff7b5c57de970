"""
Email backend that delivers through the Resend HTTP API.

Enable with EMAIL_BACKEND='core.mail.ResendEmailBackend' and RESEND_API_KEY.
"""
import logging

import requests
from django.conf import settings
from django.core.mail.backends.base import BaseEmailBackend

logger = logging.getLogger(__name__)


class ResendEmailBackend(BaseEmailBackend):
    timeout = 10

    def __init__(self, fail_silently=False, api_key=None, api_url=None, **kwargs):
        super().__init__(fail_silently=fail_silently, **kwargs)
        self.api_key = api_key or settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL

    def send_messages(self, email_messages):
        if not email_messages:
            return 0

        sent = 0
        for message in email_messages:
            try:
                self._send(message)
                sent += 1
            except requests.RequestException as e:
                logger.error("Resend delivery failed for %s: %s", message.to, e)
                if not self.fail_silently:
                    raise
        return sent

    def _send(self, message):
        if not self.api_key:
            raise requests.RequestException("RESEND_API_KEY is not configured")

        payload = {
            'from': message.from_email or settings.DEFAULT_FROM_EMAIL,
            'to': list(message.to),
            'subject': message.subject,
            'text': message.body,
        }
        for content, mimetype in getattr(message, 'alternatives', []):
            if mimetype == 'text/html':
                payload['html'] = content

        response = requests.post(
            self.api_url,
            json=payload,
            headers={
                'Authorization': f'Bearer {self.api_key}',
                'Content-Type': 'application/json',
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response
