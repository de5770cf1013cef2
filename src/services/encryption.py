"""
Symmetric encryption of recipient addresses.

Site owners embed an encrypted token instead of their real address in public
form HTML. The token is AES-256-GCM over the address, keyed by SHA-256 of the
shared key string, and serialized as unpadded URL-safe base64 of
nonce || ciphertext || tag so it survives form and query-string encoding.
"""

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM


NONCE_SIZE = 12
TAG_SIZE = 16


class DecryptionError(Exception):
    """Raised when a token cannot be decrypted with the given key."""
    pass


class EncryptionConfigurationError(Exception):
    """Raised when no usable key is supplied."""
    pass


def _derive_key(key: str) -> bytes:
    if not key:
        raise EncryptionConfigurationError("Encryption key must not be empty")
    return hashlib.sha256(key.encode('utf-8')).digest()


def _decode_token(token: str) -> bytes:
    value = token.strip()
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.urlsafe_b64decode(padded.encode('ascii'))
    except (ValueError, binascii.Error) as exc:
        raise DecryptionError(f"Invalid token encoding: {exc}") from exc


def encrypt(plaintext: str, key: str) -> str:
    """
    Encrypt a value into a URL-safe token.

    Args:
        plaintext: Value to protect (normally an email address)
        key: Shared encryption key

    Returns:
        str: Token accepted by decrypt()

    Raises:
        EncryptionConfigurationError: If key is empty

    Example:
        >>> token = encrypt("owner@example.com", "secret")
        >>> decrypt(token, "secret")
        'owner@example.com'
    """
    aesgcm = AESGCM(_derive_key(key))
    nonce = os.urandom(NONCE_SIZE)
    encrypted = aesgcm.encrypt(nonce, plaintext.encode('utf-8'), None)
    return base64.urlsafe_b64encode(nonce + encrypted).decode('ascii').rstrip('=')


def decrypt(token: str, key: str) -> str:
    """
    Decrypt a token produced by encrypt().

    Whether the plaintext is a usable email address is not checked here;
    that is the caller's concern.

    Args:
        token: URL-safe base64 token
        key: Shared encryption key

    Returns:
        str: Decrypted plaintext

    Raises:
        DecryptionError: If the token is malformed, was issued with another
            key, or does not decode to UTF-8
        EncryptionConfigurationError: If key is empty
    """
    derived = _derive_key(key)

    if not isinstance(token, str) or not token:
        raise DecryptionError("Token is empty")

    raw = _decode_token(token)
    if len(raw) < NONCE_SIZE + TAG_SIZE:
        raise DecryptionError(f"Token too short: {len(raw)} bytes")

    nonce, encrypted = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    try:
        plaintext = AESGCM(derived).decrypt(nonce, encrypted, None)
    except InvalidTag as exc:
        raise DecryptionError("Token authentication failed") from exc

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError as exc:
        raise DecryptionError("Decrypted token is not valid UTF-8") from exc
