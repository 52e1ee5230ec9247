"""Token and signature generators used by Credentials."""

from .base import HashGeneratorProtocol, JwtGeneratorProtocol
from .hash_generator import SUPPORTED_METHODS, HashGenerator
from .jwt_generator import JwtGenerator

__all__ = [
    "HashGenerator",
    "HashGeneratorProtocol",
    "JwtGenerator",
    "JwtGeneratorProtocol",
    "SUPPORTED_METHODS",
]
