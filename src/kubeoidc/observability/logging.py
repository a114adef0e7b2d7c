"""Structured logging for kubeoidc.

kubeoidc is a library, so importing it never touches the host's logging
setup. Every module logs through ``get_logger``, which wraps a standard
library logger in the ``kubeoidc`` namespace with structlog: events are
emitted as stdlib records whose message is the event name and whose
key-value context travels as record attributes. The host application's
handlers decide where they go.

``configure_logging`` is an opt-in convenience for scripts and local
development. It installs a single structlog-rendered handler (console or
JSON) on the ``kubeoidc`` logger only; the root logger is left alone.

Environment Variables:
    KUBEOIDC_LOG_FORMAT: "json" or "console", used by configure_logging
    KUBEOIDC_LOG_LEVEL: Level for the kubeoidc logger, used by configure_logging
    KUBEOIDC_DEBUG: Set to "true" or "1" to disable redaction in sanitize_for_logging

Example:
    >>> from kubeoidc.observability.logging import configure_logging, get_logger
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> logger = get_logger("kubeoidc.extractor")
    >>> logger.info("kubeoidc.extractor.processed", issuer="https://issuer.example")
"""

import logging
import os
import sys
from typing import Any, Optional

import structlog
from structlog.typing import Processor

PACKAGE_LOGGER_NAME = "kubeoidc"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"

ENV_LOG_FORMAT = "KUBEOIDC_LOG_FORMAT"
ENV_LOG_LEVEL = "KUBEOIDC_LOG_LEVEL"
ENV_DEBUG = "KUBEOIDC_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Key substrings (case-insensitive) that indicate sensitive data to redact
_SENSITIVE_KEY_PATTERNS = frozenset({"password", "token", "secret", "key", "authorization", "auth"})

# Handler installed by configure_logging, replaced on reconfiguration
_installed_handler: Optional[logging.Handler] = None

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def _is_sensitive_key(key: str) -> bool:
    lower = key.lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def is_debug_mode() -> bool:
    """Return True if KUBEOIDC_DEBUG is set to a truthy value (e.g. true, 1)."""
    value = os.environ.get(ENV_DEBUG, "").strip().lower()
    return value in ("true", "1", "yes", "on")


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive values from a dict before it is logged.

    Keys containing (case-insensitive) password, token, secret, key,
    authorization or auth get REDACTED_PLACEHOLDER as value. Nested dicts
    and lists of dicts are handled recursively. In debug mode the data is
    returned unredacted.

    Example:
        >>> sanitize_for_logging({"clientID": "abc", "clientSecret": "xyz"})
        {'clientID': 'abc', 'clientSecret': '***REDACTED***'}
    """
    if not data:
        return {}
    if is_debug_mode():
        return dict(data)
    result: dict[str, Any] = {}
    for k, v in data.items():
        if _is_sensitive_key(k):
            result[k] = REDACTED_PLACEHOLDER
        elif isinstance(v, dict):
            result[k] = sanitize_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in v
            ]
        else:
            result[k] = v
    return result


def _library_processors() -> list[Processor]:
    """Processors turning a structlog call into a plain stdlib log call."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.render_to_log_kwargs,
    ]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``.

    Independent of any global ``structlog.configure()`` call, so importing
    kubeoidc never configures logging for the host.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("kubeoidc.extractor.missing_id_token", token_endpoint=url)
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_library_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def _formatter(log_format: str) -> structlog.stdlib.ProcessorFormatter:
    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    log_format: Optional[str] = None,
    log_level: Optional[str] = None,
) -> logging.Handler:
    """Render kubeoidc events to stdout (opt-in).

    Installs one handler on the ``kubeoidc`` logger, replacing the handler
    installed by a previous call. Other handlers, and the root logger, are
    not touched.

    Args:
        log_format: "json" or "console". Defaults to env var or "console"
        log_level: Minimum level. Defaults to env var or "INFO"

    Returns:
        The installed handler.
    """
    global _installed_handler

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if _installed_handler is not None:
        package_logger.removeHandler(_installed_handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(log_format))
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level))

    _installed_handler = handler
    return handler
