"""Shared fixtures."""

from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from api_credentials.audit import reset_logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging state between tests."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture(scope="session")
def rsa_key():
    """An RSA key pair shared by the whole test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key) -> bytes:
    """PEM encoded private key bytes."""
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def public_key_pem(rsa_key) -> bytes:
    """PEM encoded public key bytes."""
    return rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture
def private_key_file(tmp_path: Path, private_key_pem: bytes) -> Path:
    """A private key written to a temporary file."""
    path = tmp_path / "private-test.key"
    path.write_bytes(private_key_pem)
    return path
