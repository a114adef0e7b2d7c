"""Observability module for kubeoidc.

Structured logging (structlog over the stdlib ``kubeoidc`` logger) that
leaves the host's logging configuration alone, plus helpers to keep
secrets out of logs.

Example:
    >>> from kubeoidc.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("kubeoidc.extractor.exchanged", token_endpoint="https://issuer.example/token")
"""

from kubeoidc.observability.logging import (
    PACKAGE_LOGGER_NAME,
    REDACTED_PLACEHOLDER,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "REDACTED_PLACEHOLDER",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
