"""
Format validators for submitted field values.

Pure predicates: they answer yes/no and never raise for bad input.
"""

import re
from urllib.parse import urlsplit

from email_validator import validate_email, EmailNotValidError


MAX_URL_LENGTH = 2048
WEBSITE_SCHEMES = ('http', 'https')

_HOSTNAME_LABEL = re.compile(r'^(?!-)[a-z0-9-]{1,63}(?<!-)$')
_TOP_LEVEL_LABEL = re.compile(r'^(?:[a-z]{2,63}|xn--[a-z0-9-]{1,59})$')


def is_email(value) -> bool:
    """
    Check whether a value is a syntactically valid email address.

    Deliverability (DNS/MX) is not checked; this must stay a pure,
    offline check.

    Args:
        value: Candidate address

    Returns:
        bool: True if the value is a valid address

    Example:
        >>> is_email("someone@example.com")
        True
        >>> is_email("not-an-email")
        False
    """
    if not isinstance(value, str) or not value:
        return False

    try:
        validate_email(value, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def is_website(value) -> bool:
    """
    Check whether a value is an absolute http(s) URL with a public hostname.

    Args:
        value: Candidate URL

    Returns:
        bool: True if the value can be used as a redirect target

    Example:
        >>> is_website("https://example.com/thanks")
        True
        >>> is_website("not-a-url")
        False
    """
    if not isinstance(value, str) or not value or len(value) > MAX_URL_LENGTH:
        return False
    if any(ch.isspace() for ch in value):
        return False

    try:
        parts = urlsplit(value)
        # Accessing .port validates it and raises on out-of-range values
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in WEBSITE_SCHEMES:
        return False

    hostname = parts.hostname
    if not hostname:
        return False

    labels = hostname.rstrip('.').split('.')
    if len(labels) < 2:
        return False
    if not all(_HOSTNAME_LABEL.match(label) for label in labels):
        return False

    return bool(_TOP_LEVEL_LABEL.match(labels[-1]))
