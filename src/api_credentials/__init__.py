"""
api-credentials: canonical API credentials for client libraries.

Normalizes the different ways credentials can be supplied into a single
Credentials object, loads private keys from files or inline text, and
generates JWTs and request signatures through replaceable generators.
"""

from .config import CredentialsConfig
from .credentials import Credentials
from .errors import (
    ConfigurationError,
    CredentialsError,
    GeneratorError,
    JwtGenerationError,
    SignatureError,
)
from .generators import (
    HashGenerator,
    HashGeneratorProtocol,
    JwtGenerator,
    JwtGeneratorProtocol,
)
from .keys import resolve_private_key

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "Credentials",
    "CredentialsConfig",
    "CredentialsError",
    "GeneratorError",
    "HashGenerator",
    "HashGeneratorProtocol",
    "JwtGenerationError",
    "JwtGenerator",
    "JwtGeneratorProtocol",
    "SignatureError",
    "resolve_private_key",
]
