"""Normalization of the call shapes accepted by Credentials.parse()."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from .config import CredentialsConfig
from .errors import ConfigurationError

POSITIONAL_FIELDS = (
    "api_key",
    "api_secret",
    "private_key",
    "application_id",
    "signature_secret",
    "signature_method",
)


class CallShape(str, Enum):
    """How parse() was called."""

    POSITIONAL = "positional"
    CONFIG = "config"
    INSTANCE = "instance"


def classify_arguments(
    args: Tuple[Any, ...], kwargs: Dict[str, Any], canonical_type: type
) -> CallShape:
    """Decide which call shape the arguments follow.

    A single positional argument that is already a ``canonical_type``
    instance passes through. A single mapping or CredentialsConfig is a
    configuration object. Everything else is positional.
    """
    if len(args) == 1 and not kwargs:
        (value,) = args
        if isinstance(value, canonical_type):
            return CallShape.INSTANCE
        if isinstance(value, (Mapping, CredentialsConfig)):
            return CallShape.CONFIG
    return CallShape.POSITIONAL


def config_from_mapping(value: Any) -> CredentialsConfig:
    """Build a CredentialsConfig from a mapping.

    Raises:
        ConfigurationError: If a recognized key holds a value of the wrong type.
    """
    if isinstance(value, CredentialsConfig):
        return value
    try:
        return CredentialsConfig.model_validate(dict(value))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid credentials configuration: {e}") from e


def normalize_arguments(
    args: Tuple[Any, ...], kwargs: Dict[str, Any]
) -> Dict[str, Any]:
    """Map positional and keyword arguments onto credential field names.

    Raises:
        TypeError: If too many positional arguments are given, or a field is
            given both positionally and by keyword.
    """
    if len(args) > len(POSITIONAL_FIELDS):
        raise TypeError(
            f"Credentials takes at most {len(POSITIONAL_FIELDS)} positional "
            f"arguments ({len(args)} given)"
        )

    fields = dict(zip(POSITIONAL_FIELDS, args))
    for name, value in kwargs.items():
        if name in fields:
            raise TypeError(f"Got multiple values for argument {name!r}")
        fields[name] = value
    return fields
