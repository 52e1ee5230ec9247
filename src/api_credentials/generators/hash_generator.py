"""Default request signature generator."""

import hashlib
import hmac
from collections.abc import Mapping
from typing import Any, Optional

import structlog

from ..errors import SignatureError

logger = structlog.get_logger(__name__)

SUPPORTED_METHODS = ("md5hash", "md5", "sha1", "sha256", "sha512")


def _escape(value: Any) -> str:
    return str(value).replace("&", "_").replace("=", "_")


def signing_string(params: Mapping[str, Any]) -> str:
    """Build the canonical query string that gets signed.

    Parameters are sorted by name, any existing ``sig`` is dropped, and
    ``&`` or ``=`` inside values become ``_``.
    """
    return "".join(
        f"&{key}={_escape(params[key])}" for key in sorted(params) if key != "sig"
    )


class HashGenerator:
    """Sign request parameters with a shared signature secret."""

    def generate(
        self, secret: Optional[str], method: Optional[str], params: Mapping[str, Any]
    ) -> str:
        """Generate a hex signature for ``params``.

        Args:
            secret: Shared signature secret.
            method: One of ``md5hash``, ``md5``, ``sha1``, ``sha256``, ``sha512``.
                ``md5hash`` appends the secret and hashes; the others are HMACs.
            params: Request parameters to sign.

        Returns:
            Lowercase hex digest.

        Raises:
            SignatureError: If the secret is missing or the method is unknown.
        """
        if method not in SUPPORTED_METHODS:
            raise SignatureError(
                f"Unknown signature algorithm: {method}. "
                f"Expected one of: {', '.join(SUPPORTED_METHODS)}"
            )
        if not secret:
            raise SignatureError("A signature secret is required")

        query = signing_string(params or {})

        if method == "md5hash":
            digest = hashlib.md5((query + secret).encode("utf-8")).hexdigest()
        else:
            digest = hmac.new(
                secret.encode("utf-8"), query.encode("utf-8"), method
            ).hexdigest()

        logger.debug("generated_signature", method=method, param_count=len(params or {}))
        return digest
