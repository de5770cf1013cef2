"""
Submission validation pipeline - core business logic.

This module decides whether a form submission may proceed to email assembly:
1. Check the requested response format
2. Reject submissions that filled in the honeypot
3. Resolve single recipient fields (_to)
4. Resolve delimited recipient fields (_cc, _bcc, _replyTo)
5. Require a primary recipient
6. Check the redirect target

Checks run strictly in this order and the first failure stops the pipeline.
Validation failures are returned as ValidationResult with success=False;
any other exception (key configuration, cipher faults) propagates.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from services import encryption
from services import validation
from .errors import (
    ValidationError,
    ForbiddenError,
    UnprocessableEntityError,
    InvalidRecipientError,
    MissingRecipientError,
    ResolutionFailure,
)
from .models import (
    RECIPIENT_DELIMITER,
    RecipientField,
    RecipientSet,
    ResponseFormat,
    ValidatedSubmission,
    ValidationResult,
)
from .recipient_resolver import RecipientResolver, Decryptor

logger = logging.getLogger(__name__)

FORMAT_FIELD = 'format'
HONEYPOT_FIELD = '_honeypot'
REDIRECT_FIELD = '_redirect'

ALLOWED_FORMATS = (ResponseFormat.JSON, ResponseFormat.HTML)


@dataclass
class _ValidationState:
    """Working state of a single validate() call."""
    recipients: RecipientSet = field(default_factory=RecipientSet)
    response_format: ResponseFormat = ResponseFormat.HTML
    redirect_url: Optional[str] = None
    query_parameters: Dict[str, str] = field(default_factory=dict)


class RequestValidator:
    """
    Runs the ordered, fail-fast checks over a flattened submission.

    The validator holds no per-request state: every validate() call starts
    from a fresh recipient set, so validating the same fields twice gives
    the same result.
    """

    def __init__(self, encryption_key: str, decryptor: Decryptor = encryption.decrypt):
        """
        Initialize validator.

        Args:
            encryption_key: Shared key used to decrypt recipient tokens
            decryptor: decrypt(token, key) callable (defaults to AES-GCM tokens)
        """
        self.resolver = RecipientResolver(encryption_key, decryptor)
        self._checks = (
            self._check_response_format,
            self._check_honeypot,
            self._check_single_recipients,
            self._check_delimited_recipients,
            self._check_primary_recipient,
            self._check_redirect,
        )

    def validate(
        self,
        fields: Dict[str, str],
        query_parameters: Optional[Dict[str, str]] = None
    ) -> ValidationResult:
        """
        Validate a flattened submission.

        Args:
            fields: Field name to raw value mapping (see SubmissionParser)
            query_parameters: Query string parameters only; the response
                format is read from here and never from the form body

        Returns:
            ValidationResult with success=True and the validated submission,
            or success=False and the failing check's error
        """
        state = _ValidationState(query_parameters=dict(query_parameters or {}))

        try:
            for check in self._checks:
                check(fields, state)
                logger.debug(f"Check passed: {check.__name__}")
        except ValidationError as e:
            logger.warning(f"Submission rejected ({e.outcome}): {e.message}")
            return ValidationResult(
                success=False,
                fields=fields,
                response_format=state.response_format,
                error=e
            )

        recipients = state.recipients.freeze()
        logger.info(
            f"Submission accepted: cc={len(recipients.cc)}, bcc={len(recipients.bcc)}, "
            f"replyTo={len(recipients.reply_to)}, format={state.response_format.value}, "
            f"redirect={state.redirect_url is not None}"
        )

        return ValidationResult(
            success=True,
            fields=fields,
            response_format=state.response_format,
            submission=ValidatedSubmission(
                fields=fields,
                recipients=recipients,
                response_format=state.response_format,
                redirect_url=state.redirect_url
            )
        )

    def _check_response_format(self, fields: Dict[str, str], state: _ValidationState) -> None:
        if FORMAT_FIELD not in state.query_parameters:
            return

        requested = state.query_parameters[FORMAT_FIELD]
        for response_format in ALLOWED_FORMATS:
            if requested == response_format.value:
                state.response_format = response_format
                return

        raise UnprocessableEntityError('Invalid response format in the query string')

    def _check_honeypot(self, fields: Dict[str, str], state: _ValidationState) -> None:
        if fields.get(HONEYPOT_FIELD):
            raise ForbiddenError('You shall not pass')

    def _check_single_recipients(self, fields: Dict[str, str], state: _ValidationState) -> None:
        for recipient_field in RecipientField.single_fields():
            if recipient_field.field_name not in fields:
                continue
            self._add_recipient(fields[recipient_field.field_name], recipient_field, state)

    def _check_delimited_recipients(self, fields: Dict[str, str], state: _ValidationState) -> None:
        for recipient_field in RecipientField.delimited_fields():
            if recipient_field.field_name not in fields:
                continue
            # Empty tokens (e.g. a trailing ';') are not dropped and fail resolution
            for token in fields[recipient_field.field_name].split(RECIPIENT_DELIMITER):
                self._add_recipient(token, recipient_field, state)

    def _check_primary_recipient(self, fields: Dict[str, str], state: _ValidationState) -> None:
        if state.recipients.to == '':
            raise MissingRecipientError("Please provide a recipient in '_to' field")

    def _check_redirect(self, fields: Dict[str, str], state: _ValidationState) -> None:
        if REDIRECT_FIELD not in fields:
            return

        redirect_url = fields[REDIRECT_FIELD]
        if not validation.is_website(redirect_url):
            raise UnprocessableEntityError("Invalid website URL in '_redirect'")

        state.response_format = ResponseFormat.PLAIN
        state.redirect_url = redirect_url

    def _add_recipient(self, token: str, recipient_field: RecipientField, state: _ValidationState) -> None:
        try:
            address = self.resolver.resolve(token, recipient_field)
        except ResolutionFailure as e:
            raise InvalidRecipientError(e.field) from e
        state.recipients.add(recipient_field, address)


def validate(
    fields: Dict[str, str],
    encryption_key: str,
    query_parameters: Optional[Dict[str, str]] = None
) -> ValidationResult:
    """
    Validate a flattened submission with the given encryption key.

    Args:
        fields: Field name to raw value mapping
        encryption_key: Shared key used to decrypt recipient tokens
        query_parameters: Query string parameters (source of the response format)

    Returns:
        ValidationResult
    """
    return RequestValidator(encryption_key).validate(fields, query_parameters)
