"""
Encryption key configuration.

The key is loaded with the following priority:
1. ENCRYPTION_KEY environment variable (plain value)
2. SSM Parameter Store SecureString named by ENCRYPTION_KEY_PARAMETER

SSM values are cached in memory for warm Lambda invocations with TTL.
"""

import logging
import os
import time
from typing import Dict, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the encryption key is missing or cannot be loaded."""
    pass


# Cache TTL in seconds (default: 5 minutes)
CACHE_TTL_SECONDS = int(os.environ.get('KEY_CACHE_TTL', '300'))

# Module-level cache: {parameter_name: (value, timestamp)}
_key_cache: Dict[str, Tuple[str, float]] = {}

# Configure SSM client with timeouts to prevent infinite hangs
ssm_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=5,
    read_timeout=10
)

# Initialize SSM client at module level (thread-safe, reused across invocations)
ssm_client = boto3.client('ssm', config=ssm_config)

# Configuration from environment variables
ENCRYPTION_KEY = os.environ.get('ENCRYPTION_KEY')
ENCRYPTION_KEY_PARAMETER = os.environ.get('ENCRYPTION_KEY_PARAMETER')


def is_configured() -> bool:
    """Check if any encryption key source is configured."""
    return bool(ENCRYPTION_KEY or ENCRYPTION_KEY_PARAMETER)


def _load_from_ssm(parameter_name: str) -> str:
    """
    Load the key from SSM Parameter Store.

    Args:
        parameter_name: SSM parameter name

    Returns:
        str: Decrypted parameter value

    Raises:
        ConfigurationError: If the parameter does not exist or is empty
        ClientError: For any other SSM failure
    """
    logger.info(f"Loading encryption key from SSM parameter: {parameter_name}")

    try:
        response = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code == 'ParameterNotFound':
            logger.error(f"SSM parameter not found: {parameter_name}")
            raise ConfigurationError(f"Encryption key parameter not found: {parameter_name}")
        logger.error(f"Failed to load SSM parameter {parameter_name}: {e}")
        raise

    value = response.get('Parameter', {}).get('Value', '')
    if not value:
        raise ConfigurationError(f"Encryption key parameter is empty: {parameter_name}")

    return value


def load_encryption_key(use_cache: bool = True) -> str:
    """
    Load the shared encryption key.

    Priority: ENCRYPTION_KEY -> Cache -> SSM Parameter Store

    Args:
        use_cache: Use cached SSM value if available (default: True)

    Returns:
        str: Encryption key

    Raises:
        ConfigurationError: If no key source is configured or the key is missing
    """
    if ENCRYPTION_KEY:
        return ENCRYPTION_KEY

    if not ENCRYPTION_KEY_PARAMETER:
        raise ConfigurationError(
            "Neither ENCRYPTION_KEY nor ENCRYPTION_KEY_PARAMETER is set. "
            "Please configure one of them in your Lambda environment."
        )

    current_time = time.time()

    if use_cache and ENCRYPTION_KEY_PARAMETER in _key_cache:
        cached_value, cached_time = _key_cache[ENCRYPTION_KEY_PARAMETER]
        age_seconds = current_time - cached_time

        if age_seconds < CACHE_TTL_SECONDS:
            logger.debug(f"Using cached encryption key (age: {int(age_seconds)}s)")
            return cached_value

        logger.info(
            f"Cache expired for encryption key "
            f"(age: {int(age_seconds)}s > TTL: {CACHE_TTL_SECONDS}s), reloading..."
        )

    value = _load_from_ssm(ENCRYPTION_KEY_PARAMETER)
    _key_cache[ENCRYPTION_KEY_PARAMETER] = (value, current_time)

    return value


def clear_cache() -> None:
    """
    Clear the key cache.

    Useful for testing or forcing a reload after rotating the key.
    """
    _key_cache.clear()
    logger.info("Encryption key cache cleared")
