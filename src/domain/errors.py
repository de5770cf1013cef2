"""
Validation error types for form submissions.

Each error carries the HTTP status it maps to and the named outcome
used when rendering the failure back to the submitter.
"""

from typing import Optional


class ValidationError(Exception):
    """Base class for submissions that must not proceed to email assembly."""

    status_code = 400
    outcome = 'invalid-field'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ForbiddenError(ValidationError):
    """Raised when the submission carries a spam signal."""

    status_code = 403
    outcome = 'honeypot-detected'


class UnprocessableEntityError(ValidationError):
    """Raised when a field is malformed. The caller may correct it and resubmit."""

    status_code = 422
    outcome = 'invalid-field'


class InvalidRecipientError(UnprocessableEntityError):
    """Raised when a recipient field does not resolve to a usable address."""

    outcome = 'invalid-recipient'

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid email in '{field}' field")
        self.field = field


class MissingRecipientError(UnprocessableEntityError):
    outcome = 'missing-recipient'


class ResolutionFailure(Exception):
    """A single token could not be resolved to an address."""

    def __init__(self, field: str):
        super().__init__(f"Could not resolve recipient in '{field}'")
        self.field = field
