"""Canonical API credentials and token/signature generation."""

import hmac
import threading
from collections.abc import Mapping
from typing import Any, Optional

import structlog

from .audit import EventType, audit_event, fingerprint
from .config import CredentialsConfig
from .generators import (
    HashGenerator,
    HashGeneratorProtocol,
    JwtGenerator,
    JwtGeneratorProtocol,
)
from .keys import PrivateKeySource, resolve_private_key
from .parser import CallShape, classify_arguments, config_from_mapping, normalize_arguments

logger = structlog.get_logger(__name__)


class Credentials:
    """API credentials for a client.

    Holds the API key and secret, an optional application ID and private key
    for JWT generation, and an optional signature secret and method for
    signing requests. Token and signature generation is delegated to
    generator objects that are created on first use and can be replaced per
    instance.

    Args:
        api_key: API key. Not validated; a missing key is logged as a warning.
        api_secret: API secret. Not validated either.
        private_key: Key bytes, a path to a key file, or the key text itself.
        application_id: Default application ID for JWTs.
        signature_secret: Default secret for request signatures.
        signature_method: Default signature method, e.g. ``md5hash`` or ``sha256``.

    Raises:
        ConfigurationError: If the private key cannot be materialized.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        private_key: Optional[PrivateKeySource] = None,
        application_id: Optional[str] = None,
        signature_secret: Optional[str] = None,
        signature_method: Optional[str] = None,
    ):
        if not api_key or not api_secret:
            logger.warning(
                "missing_api_credential",
                has_api_key=bool(api_key),
                has_api_secret=bool(api_secret),
            )

        # Resolved first so a failure leaves no half-built instance behind
        self._private_key = resolve_private_key(private_key)
        self._api_key = api_key
        self._subject = fingerprint(api_key)
        self._api_secret = api_secret
        self._application_id = application_id
        self._signature_secret = signature_secret
        self._signature_method = signature_method

        self._jwt_generator: Optional[JwtGeneratorProtocol] = None
        self._hash_generator: Optional[HashGeneratorProtocol] = None
        self._generator_lock = threading.Lock()

        audit_event(
            event_type=EventType.CRED_CREATE,
            subject=self._subject,
            success=True,
            details={
                "application_id": application_id,
                "signing_material": self._private_key is not None,
                "signature_method": signature_method,
            },
        )

    @classmethod
    def parse(cls, *args: Any, **kwargs: Any) -> "Credentials":
        """Normalize any supported input into a Credentials instance.

        Accepts the constructor's positional/keyword arguments, a single
        mapping (camelCase or snake_case keys) or CredentialsConfig, or an
        existing Credentials instance, which is returned as is.

        Raises:
            ConfigurationError: If the input cannot be turned into credentials.
        """
        shape = classify_arguments(args, kwargs, cls)
        logger.debug("parsing_credentials", shape=shape.value)

        if shape is CallShape.INSTANCE:
            return args[0]

        if shape is CallShape.CONFIG:
            config = config_from_mapping(args[0])
            fields = config.model_dump(by_alias=False)
        else:
            fields = normalize_arguments(args, kwargs)

        audit_event(
            event_type=EventType.CRED_PARSE,
            subject=fingerprint(fields.get("api_key")),
            success=True,
            details={"shape": shape.value},
        )
        return cls(**fields)

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def api_secret(self) -> Optional[str]:
        return self._api_secret

    @property
    def private_key(self) -> Optional[bytes]:
        return self._private_key

    @property
    def application_id(self) -> Optional[str]:
        return self._application_id

    @property
    def signature_secret(self) -> Optional[str]:
        return self._signature_secret

    @property
    def signature_method(self) -> Optional[str]:
        return self._signature_method

    def _bind_default(self, slot: str, factory) -> Any:
        """Return the generator in ``slot``, creating the default once."""
        generator = getattr(self, slot)
        if generator is not None:
            return generator

        with self._generator_lock:
            generator = getattr(self, slot)
            if generator is None:
                generator = factory()
                setattr(self, slot, generator)
                audit_event(
                    event_type=EventType.GENERATOR_BIND,
                    subject=self._subject,
                    success=True,
                    details={
                        "slot": slot.lstrip("_"),
                        "generator": type(generator).__name__,
                        "default": True,
                    },
                )
        return generator

    def _get_jwt_generator(self) -> JwtGeneratorProtocol:
        return self._bind_default("_jwt_generator", JwtGenerator)

    def _get_hash_generator(self) -> HashGeneratorProtocol:
        return self._bind_default("_hash_generator", HashGenerator)

    def _set_jwt_generator(self, generator: JwtGeneratorProtocol) -> None:
        """Replace the JWT generator used by this instance."""
        with self._generator_lock:
            self._jwt_generator = generator
        audit_event(
            event_type=EventType.GENERATOR_BIND,
            subject=self._subject,
            success=True,
            details={
                "slot": "jwt_generator",
                "generator": type(generator).__name__,
                "default": False,
            },
        )

    def _set_hash_generator(self, generator: HashGeneratorProtocol) -> None:
        """Replace the signature generator used by this instance."""
        with self._generator_lock:
            self._hash_generator = generator
        audit_event(
            event_type=EventType.GENERATOR_BIND,
            subject=self._subject,
            success=True,
            details={
                "slot": "hash_generator",
                "generator": type(generator).__name__,
                "default": False,
            },
        )

    def generate_jwt(
        self,
        application_id: Optional[str] = None,
        private_key: Optional[bytes] = None,
    ) -> Any:
        """Generate a JWT for an application.

        Args:
            application_id: Overrides the stored application ID.
            private_key: Overrides the stored private key.

        Returns:
            Whatever the bound JWT generator returns.
        """
        generator = self._get_jwt_generator()
        if application_id is None:
            application_id = self._application_id
        if private_key is None:
            private_key = self._private_key

        try:
            token = generator.generate(private_key, {"application_id": application_id})
        except Exception as e:
            audit_event(
                event_type=EventType.JWT_GENERATE,
                subject=self._subject,
                success=False,
                details={"application_id": application_id},
                error=e,
            )
            raise

        audit_event(
            event_type=EventType.JWT_GENERATE,
            subject=self._subject,
            success=True,
            details={"application_id": application_id},
        )
        return token

    def generate_signature(
        self,
        params: Any,
        method: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> Any:
        """Sign request parameters.

        Args:
            params: Parameters to sign, passed to the generator untouched.
            method: Overrides the stored signature method.
            secret: Overrides the stored signature secret.

        Returns:
            Whatever the bound signature generator returns.
        """
        generator = self._get_hash_generator()
        if method is None:
            method = self._signature_method
        if secret is None:
            secret = self._signature_secret

        try:
            signature = generator.generate(secret, method, params)
        except Exception as e:
            audit_event(
                event_type=EventType.SIGNATURE_GENERATE,
                subject=self._subject,
                success=False,
                details={"method": method},
                error=e,
            )
            raise

        audit_event(
            event_type=EventType.SIGNATURE_GENERATE,
            subject=self._subject,
            success=True,
            details={"method": method},
        )
        return signature

    def check_signature(
        self,
        params: Mapping[str, Any],
        method: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> bool:
        """Check the ``sig`` parameter of a signed request.

        The expected signature is recomputed from ``params`` without ``sig``
        and compared in constant time.

        Returns:
            True if ``params["sig"]`` matches, False otherwise or when absent.
        """
        received = params.get("sig")
        if not received:
            valid = False
        else:
            unsigned = {k: v for k, v in params.items() if k != "sig"}
            expected = self.generate_signature(unsigned, method, secret)
            valid = hmac.compare_digest(
                str(expected).lower().encode("utf-8"),
                str(received).lower().encode("utf-8"),
            )

        audit_event(
            event_type=EventType.SIGNATURE_CHECK,
            subject=self._subject,
            success=valid,
            details={"method": method or self._signature_method},
        )
        return valid

    def to_config(self) -> CredentialsConfig:
        """Export the stored fields, with the private key as bytes."""
        return CredentialsConfig(
            api_key=self._api_key,
            api_secret=self._api_secret,
            application_id=self._application_id,
            private_key=self._private_key,
            signature_secret=self._signature_secret,
            signature_method=self._signature_method,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(api_key={self._api_key!r}, "
            f"application_id={self._application_id!r})"
        )
