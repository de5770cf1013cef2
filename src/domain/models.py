"""
Data models for form submission validation.

These type-safe data structures define clear contracts between the parser,
the validator and whatever assembles the outgoing email.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Tuple

from .errors import ValidationError


class ResponseFormat(str, Enum):
    """Body format of the response sent back to the submitter."""
    HTML = 'html'
    JSON = 'json'
    PLAIN = 'plain'


class RecipientField(Enum):
    """
    Recipient-bearing form fields.

    Each member maps the external field name to its recipient bucket and
    says whether the raw value packs several addresses separated by ';'.
    """
    TO = ('_to', 'to', False)
    CC = ('_cc', 'cc', True)
    BCC = ('_bcc', 'bcc', True)
    REPLY_TO = ('_replyTo', 'replyTo', True)

    def __init__(self, field_name: str, bucket: str, delimited: bool):
        self.field_name = field_name
        self.bucket = bucket
        self.delimited = delimited

    @classmethod
    def single_fields(cls) -> List['RecipientField']:
        return [f for f in cls if not f.delimited]

    @classmethod
    def delimited_fields(cls) -> List['RecipientField']:
        return [f for f in cls if f.delimited]


RECIPIENT_DELIMITER = ';'


@dataclass(frozen=True)
class Recipients:
    """
    Immutable recipient lists of a validated submission.

    Attributes:
        to: Primary recipient address
        cc: Carbon copy addresses, in resolution order
        bcc: Blind carbon copy addresses, in resolution order
        reply_to: Reply-To addresses, in resolution order
    """
    to: str
    cc: Tuple[str, ...] = ()
    bcc: Tuple[str, ...] = ()
    reply_to: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        """Convert to dict keyed by the external bucket names."""
        return {
            'to': self.to,
            'cc': list(self.cc),
            'bcc': list(self.bcc),
            'replyTo': list(self.reply_to),
        }


@dataclass
class RecipientSet:
    """
    Mutable recipient accumulator used while a submission is validated.

    `to` is overwritten on each resolution (empty string means unset);
    the other buckets are appended to.
    """
    to: str = ''
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    reply_to: List[str] = field(default_factory=list)

    def add(self, recipient_field: RecipientField, address: str) -> None:
        """Store a resolved address in the bucket of its field."""
        if recipient_field is RecipientField.TO:
            self.to = address
        elif recipient_field is RecipientField.CC:
            self.cc.append(address)
        elif recipient_field is RecipientField.BCC:
            self.bcc.append(address)
        elif recipient_field is RecipientField.REPLY_TO:
            self.reply_to.append(address)

    def freeze(self) -> Recipients:
        return Recipients(
            to=self.to,
            cc=tuple(self.cc),
            bcc=tuple(self.bcc),
            reply_to=tuple(self.reply_to)
        )


@dataclass(frozen=True)
class ValidatedSubmission:
    """
    A submission that passed every check and may proceed to email assembly.

    Attributes:
        fields: Flattened request fields, as submitted
        recipients: Resolved recipient lists
        response_format: Format of the response body
        redirect_url: Post-submit redirect target (None if not requested)
    """
    fields: Dict[str, str]
    recipients: Recipients
    response_format: ResponseFormat = ResponseFormat.HTML
    redirect_url: Optional[str] = None


@dataclass
class ValidationResult:
    """
    Result of validating a submission.

    This explicit result type keeps validation failures out of the
    exception path of callers. Only ValidationError is captured here;
    collaborator faults still propagate.

    Attributes:
        success: Whether every check passed
        fields: Flattened request fields (kept for re-display on failure)
        response_format: Format known when validation stopped
        submission: Validated submission (if validation succeeded)
        error: The failing check's error (if validation failed)
    """
    success: bool
    fields: Dict[str, str]
    response_format: ResponseFormat = ResponseFormat.HTML
    submission: Optional[ValidatedSubmission] = None
    error: Optional[ValidationError] = None

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return self.error.status_code

    @property
    def outcome(self) -> str:
        if self.success:
            return 'accepted'
        return self.error.outcome

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.success:
            return f"ValidationResult(success=True, format={self.response_format.value})"
        else:
            return f"ValidationResult(success=False, outcome={self.outcome}, error={self.error_message})"
