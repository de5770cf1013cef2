"""
Pytest configuration and fixtures for all tests.
"""

import json
import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('ENCRYPTION_KEY', 'test-encryption-key')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


@pytest.fixture
def encryption_key():
    """Key used to issue and resolve encrypted recipient tokens."""
    return 'test-encryption-key'


@pytest.fixture
def api_gateway_event():
    """Load sample API Gateway proxy event from test data."""
    with open(os.path.join(os.path.dirname(__file__), 'events', 'api-gateway-event.json')) as f:
        return json.load(f)
