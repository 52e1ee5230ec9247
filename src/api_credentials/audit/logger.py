"""Structured audit logging for credential operations."""

import hashlib
import logging
import os
import sys
import threading
import uuid
from contextlib import suppress
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict

AUDIT_LOGGER_NAME = "api_credentials.audit"
SENSITIVE_KEYS = frozenset(
    {"password", "token", "secret", "key", "credential"}
)

_LOGGER_INSTANCE: structlog.stdlib.BoundLogger | None = None
_logger_lock = threading.Lock()


def create_secure_handler(
    log_path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    """Create a RotatingFileHandler with restrictive permissions.

    Args:
        log_path: Path to the log file
        max_bytes: Maximum size of each log file
        backup_count: Number of backup files to keep

    Returns:
        Configured RotatingFileHandler instance
    """
    os.makedirs(log_path.parent, mode=0o750, exist_ok=True)

    # Some platforms need the file present before chmod
    if not log_path.exists():
        log_path.touch(mode=0o640)
    os.chmod(log_path, 0o640)

    return RotatingFileHandler(
        str(log_path), maxBytes=max_bytes, backupCount=backup_count
    )


def add_timestamp(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    lowered = key.lower()
    return any(sk in lowered for sk in sensitive_keys)


def fingerprint(value: Any) -> str | None:
    """Return a short, non-reversible identifier for a credential value.

    Audit records name credentials by fingerprint so the value itself never
    reaches log output.
    """
    if not value:
        return None
    digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()
    return f"sha256:{digest[:12]}"


def sanitize_keys(
    event_dict: dict[str, Any], sensitive_keys: frozenset[str] | set[str] = SENSITIVE_KEYS
) -> dict[str, Any]:
    """Redact sensitive values, matching key names case-insensitively.

    Nested dictionaries and lists are sanitized recursively. A key is
    sensitive when any of ``sensitive_keys`` appears in it, so ``api_secret``
    and ``Private_Key`` are both redacted.

    Args:
        event_dict: Dictionary to sanitize
        sensitive_keys: Key fragments to redact

    Returns:
        Sanitized copy of the dictionary
    """

    def _sanitize_value(key: str, value: Any) -> Any:
        if key and _is_sensitive(key, sensitive_keys):
            return "***"
        if isinstance(value, dict):
            return sanitize_keys(value, sensitive_keys)
        if isinstance(value, (list, tuple)):
            return [_sanitize_value("", item) for item in value]
        return value

    return {k: _sanitize_value(str(k), v) for k, v in event_dict.items()}


def sanitize_event_dict(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Processor masking sensitive values before rendering."""
    # The event name itself is never redacted
    event = event_dict.pop("event", None)
    result = sanitize_keys(dict(event_dict))
    if event is not None:
        result["event"] = event
    return result


def configure_logger(
    log_level: str = "INFO",
    correlation_id: str | None = None,
    log_file: str | Path | None = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib root logger.

    This is the low-level worker behind setup_logging(); it does not touch
    the cached instance returned by get_logger().

    Args:
        log_level: Log level name
        correlation_id: Optional correlation ID bound to every record
        log_file: Optional path of a rotating JSON log file
        max_log_size: Maximum size of the log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        A bound audit logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_timestamp,
            sanitize_event_dict,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = create_secure_handler(
            Path(log_file).resolve(), max_log_size, backup_count
        )
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

    return structlog.get_logger(AUDIT_LOGGER_NAME).bind(
        correlation_id=correlation_id or str(uuid.uuid4())
    )


def setup_logging(
    *,
    log_level: str = "INFO",
    correlation_id: str | None = None,
    log_file: str | Path | None = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> structlog.stdlib.BoundLogger:
    """Setup structured logging for applications using this package.

    The package never calls this itself; importing it leaves logging
    configuration to the application.

    Args:
        log_level: Log level (default: INFO)
        correlation_id: Optional correlation ID for request tracing
        log_file: Optional path of a rotating JSON log file
        max_log_size: Maximum size of the log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        The configured audit logger, also cached for get_logger().
    """
    global _LOGGER_INSTANCE

    with suppress(Exception):
        structlog.reset_defaults()

    new_logger = configure_logger(
        log_level=log_level,
        correlation_id=correlation_id,
        log_file=log_file,
        max_log_size=max_log_size,
        backup_count=backup_count,
    )
    with _logger_lock:
        _LOGGER_INSTANCE = new_logger
    return new_logger


def get_logger() -> structlog.stdlib.BoundLogger:
    """Get the audit logger.

    Returns the instance cached by setup_logging(). When logging was never
    set up, a logger bound to a fresh correlation ID is cached and returned
    without configuring anything globally.
    """
    global _LOGGER_INSTANCE

    if _LOGGER_INSTANCE is not None:
        return _LOGGER_INSTANCE

    with _logger_lock:
        if _LOGGER_INSTANCE is None:
            _LOGGER_INSTANCE = structlog.get_logger(AUDIT_LOGGER_NAME).bind(
                correlation_id=str(uuid.uuid4())
            )
        return _LOGGER_INSTANCE


def reset_logger() -> None:
    """Reset logging state.

    Closes and removes root handlers, resets structlog and drops the cached
    audit logger. Safe to call repeatedly.
    """
    global _LOGGER_INSTANCE
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        with suppress(Exception):
            handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)

    structlog.reset_defaults()

    with _logger_lock:
        _LOGGER_INSTANCE = None


def audit_event(
    *,
    event_type: str,
    subject: str | None,
    success: bool,
    details: dict[str, Any] | None = None,
    error: Exception | None = None,
) -> None:
    """Log an audit event.

    Args:
        event_type: Type of event (e.g., "credentials.create")
        subject: What the event is about, usually an API key fingerprint or a key file path
        success: Whether the operation succeeded
        details: Optional event details, sanitized before logging
        error: Optional exception if operation failed
    """
    logger = get_logger()

    event: dict[str, Any] = {
        "event_type": str(getattr(event_type, "value", event_type)),
        "subject": subject,
        "success": success,
    }

    if details:
        event["details"] = sanitize_keys(details)

    if error:
        event["error"] = {
            "type": type(error).__name__,
            "message": str(error),
        }

    logger = logger.bind(**event)
    if success:
        logger.info("audit_event")
    else:
        logger.error("audit_event")
