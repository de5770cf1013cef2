"""
Resolution of raw recipient tokens into email addresses.

A recipient field may hold a plain address (same-origin forms) or a token
encrypted by this service (public forms that must not expose the owner's
address to scrapers).
"""

import logging
from typing import Callable

from services import encryption
from services import validation
from .errors import ResolutionFailure
from .models import RecipientField

logger = logging.getLogger(__name__)

Decryptor = Callable[[str, str], str]


class RecipientResolver:
    """
    Resolves a single raw token into an address.

    Order, first match wins:
    1. The token is itself a valid address: accepted as-is
    2. The token decrypts to a valid address: the plaintext is accepted
    3. Anything else is a ResolutionFailure

    "Decryption failed" and "decrypted to something that is not an address"
    are deliberately not distinguished.
    """

    def __init__(self, encryption_key: str, decryptor: Decryptor = encryption.decrypt):
        self.encryption_key = encryption_key
        self.decryptor = decryptor

    def resolve(self, raw_token: str, recipient_field: RecipientField) -> str:
        """
        Resolve a token from a recipient field.

        Args:
            raw_token: Plain address or encrypted token
            recipient_field: Field the token came from (for error reporting)

        Returns:
            str: Resolved email address

        Raises:
            ResolutionFailure: If the token does not resolve to a usable address
        """
        if validation.is_email(raw_token):
            return raw_token

        try:
            decrypted = self.decryptor(raw_token, self.encryption_key)
        except encryption.DecryptionError as e:
            logger.debug(f"Token in '{recipient_field.field_name}' did not decrypt: {e}")
            raise ResolutionFailure(recipient_field.field_name) from e

        if validation.is_email(decrypted):
            logger.debug(f"Resolved encrypted recipient in '{recipient_field.field_name}'")
            return decrypted

        logger.debug(f"Decrypted token in '{recipient_field.field_name}' is not an email address")
        raise ResolutionFailure(recipient_field.field_name)
