"""Audit event type definitions."""

from enum import Enum


class EventType(str, Enum):
    """Audit event types."""

    # Credential events
    CRED_PARSE = "credentials.parse"
    CRED_CREATE = "credentials.create"

    # Key events
    KEY_LOAD = "key.load"
    KEY_LOAD_FAILED = "key.load_failed"

    # Generator events
    GENERATOR_BIND = "generator.bind"
    JWT_GENERATE = "jwt.generate"
    SIGNATURE_GENERATE = "signature.generate"
    SIGNATURE_CHECK = "signature.check"
