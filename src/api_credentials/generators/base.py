"""Capability protocols for token and signature generators."""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class JwtGeneratorProtocol(Protocol):
    """Anything that can sign a JWT from key bytes and claims."""

    def generate(self, private_key: bytes, claims: Mapping[str, Any]) -> str:
        """Return a signed token.

        ``claims`` always carries ``application_id``.
        """
        ...


@runtime_checkable
class HashGeneratorProtocol(Protocol):
    """Anything that can sign request parameters with a shared secret."""

    def generate(
        self, secret: Optional[str], method: Optional[str], params: Mapping[str, Any]
    ) -> str:
        """Return the signature for ``params``."""
        ...
