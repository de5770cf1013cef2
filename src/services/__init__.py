"""
Service functions used by the submission validation pipeline.

This package contains field format validators, recipient token encryption
and encryption key configuration.
"""

__all__ = ['encryption', 'config', 'validation']
