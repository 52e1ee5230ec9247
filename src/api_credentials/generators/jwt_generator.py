"""Default JWT generator."""

import time
import uuid
from collections.abc import Mapping
from typing import Any, Dict, Optional

import jwt
import structlog
from cryptography.exceptions import UnsupportedAlgorithm

from ..errors import JwtGenerationError

logger = structlog.get_logger(__name__)

ALGORITHM = "RS256"


class JwtGenerator:
    """Sign application JWTs with an RSA private key."""

    def __init__(self, algorithm: str = ALGORITHM):
        self.algorithm = algorithm

    def build_payload(self, claims: Mapping[str, Any]) -> Dict[str, Any]:
        """Build the token payload from caller claims.

        ``issued_at`` replaces the default ``iat`` and ``ttl`` sets ``exp``
        relative to it; neither is copied into the token. ``jti`` defaults to
        a fresh time-based UUID. All other claims are copied as given.
        """
        remaining = dict(claims)
        issued_at = remaining.pop("issued_at", None)
        ttl = remaining.pop("ttl", None)

        payload: Dict[str, Any] = {
            "iat": int(issued_at) if issued_at is not None else int(time.time()),
            "jti": str(remaining.pop("jti", None) or uuid.uuid1()),
        }
        if ttl is not None:
            payload["exp"] = payload["iat"] + int(ttl)

        acl = remaining.get("acl")
        if acl is not None and not isinstance(acl, Mapping):
            raise JwtGenerationError("acl claim must be a mapping")

        payload.update(remaining)
        return payload

    def generate(
        self, private_key: bytes, claims: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Generate a signed JWT.

        Args:
            private_key: PEM encoded private key bytes.
            claims: Token claims, normally ``{"application_id": ...}``.

        Returns:
            The encoded token.

        Raises:
            JwtGenerationError: If the key or claims are unusable.
        """
        if not isinstance(private_key, bytes):
            raise JwtGenerationError(
                f"private_key must be bytes, got {type(private_key).__name__}"
            )
        if claims is None:
            claims = {}
        if not isinstance(claims, Mapping):
            raise JwtGenerationError(
                f"claims must be a mapping, got {type(claims).__name__}"
            )

        payload = self.build_payload(claims)
        try:
            token = jwt.encode(payload, private_key, algorithm=self.algorithm)
        except (jwt.exceptions.PyJWTError, UnsupportedAlgorithm, ValueError, TypeError) as e:
            raise JwtGenerationError(f"Failed to sign JWT: {e}") from e

        logger.debug(
            "generated_jwt",
            algorithm=self.algorithm,
            application_id=payload.get("application_id"),
            jti=payload["jti"],
        )
        return token
