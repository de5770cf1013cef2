"""
AWS Lambda handler for form submissions received through API Gateway.

Thin orchestration layer: flattens the event, validates it with
RequestValidator and maps the ValidationResult to an HTTP response.
Nothing is sent from here; a validated submission is ready for email assembly.
"""

import html
import json
import logging
import os
from typing import Dict, Any

from domain.models import ResponseFormat, ValidationResult
from domain.request_validator import RequestValidator
from domain.submission_parser import SubmissionParser
from services import config

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

ENVIRONMENT = os.environ.get('ENVIRONMENT', 'dev')

SUCCESS_MESSAGE = 'Form submission validated'

CONTENT_TYPES = {
    ResponseFormat.JSON: 'application/json',
    ResponseFormat.HTML: 'text/html; charset=utf-8',
    ResponseFormat.PLAIN: 'text/plain; charset=utf-8',
}

# Parser is stateless; reused across invocations
submission_parser = SubmissionParser()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Validate a form submission.

    Expected event format (API Gateway proxy integration):
    {
        "body": "_to=owner%40example.com&message=Hello",
        "isBase64Encoded": false,
        "pathParameters": {...} | null,
        "queryStringParameters": {"format": "json"} | null
    }

    Returns:
        API Gateway proxy response: 200 (or 302 for redirects) when the
        submission is valid, 403/422 when it is rejected, 500 otherwise
    """
    logger.info(f"Environment: {ENVIRONMENT}")

    try:
        fields = submission_parser.parse(event)
        logger.info(f"Received submission with {len(fields)} field(s)")

        validator = RequestValidator(config.load_encryption_key())
        result = validator.validate(fields, submission_parser.parse_query(event))

        logger.info(f"Validation outcome: {result.outcome} ({result.status_code})")
        return _build_response(result)

    except Exception as e:
        logger.error(f"Error validating submission: {str(e)}", exc_info=True)
        return {
            'statusCode': 500,
            'headers': {'Content-Type': CONTENT_TYPES[ResponseFormat.JSON]},
            'body': json.dumps({
                'error': 'Internal server error'
            })
        }


def _build_response(result: ValidationResult) -> Dict[str, Any]:
    """
    Map a validation result to an API Gateway proxy response.

    Args:
        result: Outcome of RequestValidator.validate()

    Returns:
        Dict with statusCode, headers and body in the requested format
    """
    if result.success and result.submission.redirect_url:
        return {
            'statusCode': 302,
            'headers': {'Location': result.submission.redirect_url},
            'body': ''
        }

    message = SUCCESS_MESSAGE if result.success else result.error_message
    response_format = result.response_format

    if response_format is ResponseFormat.JSON:
        payload = {
            'statusCode': result.status_code,
            'message': message,
            'outcome': result.outcome,
        }
        if result.success:
            payload['recipients'] = result.submission.recipients.to_dict()
        body = json.dumps(payload)
    elif response_format is ResponseFormat.HTML:
        body = f"<!DOCTYPE html><html><body><p>{html.escape(message)}</p></body></html>"
    else:
        body = message

    return {
        'statusCode': result.status_code,
        'headers': {
            'Content-Type': CONTENT_TYPES[response_format],
            'Access-Control-Allow-Origin': '*'
        },
        'body': body
    }


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return {
        'statusCode': 200,
        'body': json.dumps({
            'status': 'healthy',
            'environment': ENVIRONMENT,
            'encryptionKeyConfigured': config.is_configured()
        })
    }
