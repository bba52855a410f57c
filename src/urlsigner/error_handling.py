"""
Standardized Error Handling for urlsigner
=========================================

This module provides the exception hierarchy and logging helpers shared by
the signing and verification operations.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class URLSignerError(Exception):
    """Base exception for all urlsigner errors."""

    log_level = logging.WARNING

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.log(
            self.log_level,
            f"URL signer error: {message}" + (f" ({context_str})" if context_str else "")
        )


class ConfigurationError(URLSignerError):
    """Raised when signer configuration is invalid."""

    pass


class ParseFailure(URLSignerError, ValueError):
    """Raised when an input string is not a valid URL."""

    pass


class VerificationError(URLSignerError):
    """Base class for signed URLs that fail verification."""

    # Rejections are routine for a verifier
    log_level = logging.DEBUG


class InvalidSignature(VerificationError):
    """Raised when the signature is absent, malformed or does not match."""

    pass


class Expired(VerificationError):
    """Raised when the expiration is unparsable or already in the past."""

    pass


class DecodeError(ValueError):
    """Raised when an encoded signature cannot be decoded."""

    pass


@contextmanager
def signing_operation_context(operation: str, **context):
    """
    Context manager for sign/verify operations with standardized logging.

    Args:
        operation: Description of the operation
        **context: Additional context for logging
    """
    logger.debug(f"Starting signing operation: {operation}", extra=context)
    start_time = time.perf_counter()

    try:
        yield
    except VerificationError as e:
        logger.info(f"Verification rejected: {operation} - {type(e).__name__}")
        raise
    except URLSignerError:
        logger.error(f"Signing operation failed: {operation}")
        raise
    except Exception as e:
        logger.error(f"Unexpected error in signing operation: {operation} - {e}")
        raise

    duration = time.perf_counter() - start_time
    logger.debug(f"Signing operation completed: {operation} ({duration:.6f}s)")
