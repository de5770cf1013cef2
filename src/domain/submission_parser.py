"""
Flattening of API Gateway proxy events into form fields.
"""

import base64
import binascii
import logging
from typing import Dict, Any, Optional
from urllib.parse import parse_qsl

logger = logging.getLogger(__name__)


class SubmissionParser:
    """
    Normalizes an API Gateway proxy event into one flat field mapping.

    Sources are merged in increasing precedence: URL-encoded body, then
    path parameters, then query string parameters. No validation is done
    here and absent sources count as empty.
    """

    def parse(self, event: Dict[str, Any]) -> Dict[str, str]:
        """
        Merge the event's body, path and query parameters.

        Args:
            event: API Gateway proxy event

        Returns:
            Dict mapping field name to raw string value

        Example:
            >>> SubmissionParser().parse({
            ...     'body': '_to=a%40x.com&_honeypot=',
            ...     'queryStringParameters': {'format': 'json'}
            ... })
            {'_to': 'a@x.com', '_honeypot': '', 'format': 'json'}
        """
        fields: Dict[str, str] = {}

        fields.update(self._parse_body(event.get('body'), event.get('isBase64Encoded', False)))
        fields.update(self._as_fields(event.get('pathParameters')))
        fields.update(self._as_fields(event.get('queryStringParameters')))

        logger.debug(f"Parsed submission fields: {sorted(fields.keys())}")
        return fields

    def parse_query(self, event: Dict[str, Any]) -> Dict[str, str]:
        """
        Return only the query string parameters of the event.

        The response format is a query string option and must not be
        settable from the form body.
        """
        return self._as_fields(event.get('queryStringParameters'))

    def _parse_body(self, body: Optional[str], is_base64_encoded: bool) -> Dict[str, str]:
        if not body:
            return {}

        if is_base64_encoded:
            try:
                body = base64.b64decode(body).decode('utf-8')
            except (ValueError, binascii.Error) as e:
                # UnicodeDecodeError is a ValueError
                logger.warning(f"Ignoring undecodable base64 request body: {e}")
                return {}

        # Repeated keys: last value wins
        return dict(parse_qsl(body, keep_blank_values=True))

    def _as_fields(self, parameters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        if not parameters:
            return {}
        return {
            str(key): '' if value is None else str(value)
            for key, value in parameters.items()
        }


def parse(event: Dict[str, Any]) -> Dict[str, str]:
    """Flatten an API Gateway proxy event into form fields."""
    return SubmissionParser().parse(event)
