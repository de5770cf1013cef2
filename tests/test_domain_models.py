"""
Tests for domain models (data structures).
"""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.errors import ForbiddenError, MissingRecipientError
from domain.models import (
    RecipientField,
    RecipientSet,
    Recipients,
    ResponseFormat,
    ValidatedSubmission,
    ValidationResult,
)


class TestRecipientField:
    """Test the field-to-bucket table."""

    def test_field_names_and_buckets(self):
        """Each field maps to its external bucket name."""
        assert RecipientField.TO.field_name == '_to'
        assert RecipientField.TO.bucket == 'to'
        assert RecipientField.REPLY_TO.field_name == '_replyTo'
        assert RecipientField.REPLY_TO.bucket == 'replyTo'

    def test_single_and_delimited_fields(self):
        """Only _to is single-valued; the rest are ';' delimited in declaration order."""
        assert RecipientField.single_fields() == [RecipientField.TO]
        assert RecipientField.delimited_fields() == [
            RecipientField.CC,
            RecipientField.BCC,
            RecipientField.REPLY_TO,
        ]


class TestRecipientSet:
    """Test RecipientSet accumulator."""

    def test_recipient_set_defaults(self):
        """Test new set is empty with unset 'to'."""
        recipients = RecipientSet()

        assert recipients.to == ''
        assert recipients.cc == []
        assert recipients.bcc == []
        assert recipients.reply_to == []

    def test_add_to_overwrites(self):
        """Test 'to' keeps only the latest address."""
        recipients = RecipientSet()
        recipients.add(RecipientField.TO, 'first@example.com')
        recipients.add(RecipientField.TO, 'second@example.com')

        assert recipients.to == 'second@example.com'

    def test_add_delimited_appends_in_order(self):
        """Test cc/bcc/replyTo append and keep duplicates."""
        recipients = RecipientSet()
        recipients.add(RecipientField.CC, 'a@example.com')
        recipients.add(RecipientField.CC, 'b@example.com')
        recipients.add(RecipientField.CC, 'a@example.com')
        recipients.add(RecipientField.BCC, 'hidden@example.com')
        recipients.add(RecipientField.REPLY_TO, 'reply@example.com')

        assert recipients.cc == ['a@example.com', 'b@example.com', 'a@example.com']
        assert recipients.bcc == ['hidden@example.com']
        assert recipients.reply_to == ['reply@example.com']

    def test_freeze(self):
        """Test freeze() produces an immutable snapshot."""
        recipients = RecipientSet()
        recipients.add(RecipientField.TO, 'owner@example.com')
        recipients.add(RecipientField.CC, 'a@example.com')

        frozen = recipients.freeze()
        recipients.add(RecipientField.CC, 'late@example.com')

        assert frozen == Recipients(to='owner@example.com', cc=('a@example.com',))
        with pytest.raises(AttributeError):
            frozen.to = 'other@example.com'

    def test_recipients_to_dict(self):
        """Test to_dict() uses external bucket names."""
        frozen = Recipients(
            to='owner@example.com',
            cc=('a@example.com',),
            reply_to=('reply@example.com',)
        )

        assert frozen.to_dict() == {
            'to': 'owner@example.com',
            'cc': ['a@example.com'],
            'bcc': [],
            'replyTo': ['reply@example.com'],
        }


class TestValidationResult:
    """Test ValidationResult dataclass."""

    def test_validation_result_success(self):
        """Test successful ValidationResult."""
        submission = ValidatedSubmission(
            fields={'_to': 'owner@example.com'},
            recipients=Recipients(to='owner@example.com'),
            response_format=ResponseFormat.JSON
        )

        result = ValidationResult(
            success=True,
            fields=submission.fields,
            response_format=ResponseFormat.JSON,
            submission=submission
        )

        assert result.status_code == 200
        assert result.outcome == 'accepted'
        assert result.error_message is None

    def test_validation_result_forbidden(self):
        """Test failed ValidationResult for spam signal."""
        result = ValidationResult(
            success=False,
            fields={'_honeypot': 'bot'},
            error=ForbiddenError('You shall not pass')
        )

        assert result.status_code == 403
        assert result.outcome == 'honeypot-detected'
        assert result.error_message == 'You shall not pass'
        assert result.submission is None

    def test_validation_result_repr(self):
        """Test __repr__ for failed result."""
        result = ValidationResult(
            success=False,
            fields={},
            error=MissingRecipientError("Please provide a recipient in '_to' field")
        )

        repr_str = repr(result)
        assert "success=False" in repr_str
        assert "missing-recipient" in repr_str


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
