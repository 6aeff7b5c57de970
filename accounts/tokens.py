"""
Invitation token generators.

The invitation service takes a generator instance so tests can pass a
deterministic one; production uses SecureTokenGenerator.
"""
import secrets
import uuid

from django.conf import settings
from django.utils.module_loading import import_string


class TokenGenerator:
    def generate(self) -> str:
        raise NotImplementedError


class SecureTokenGenerator(TokenGenerator):
    """uuid4 followed by 16 random bytes as hex, both from the OS CSPRNG"""

    def generate(self) -> str:
        return f"{uuid.uuid4()}-{secrets.token_hex(16)}"


def get_token_generator() -> TokenGenerator:
    return import_string(settings.INVITATION_TOKEN_GENERATOR)()
