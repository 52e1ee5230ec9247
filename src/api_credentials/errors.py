"""Exception hierarchy for credential handling."""


class CredentialsError(Exception):
    """Base exception for credential operations."""


class ConfigurationError(CredentialsError):
    """Raised when credentials cannot be constructed from the given input."""


class GeneratorError(CredentialsError):
    """Base exception for the default token and signature generators."""


class JwtGenerationError(GeneratorError):
    """Raised when a JWT cannot be produced."""


class SignatureError(GeneratorError):
    """Raised when a request signature cannot be produced."""
