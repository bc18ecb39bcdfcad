"""Test configuration and fixtures."""

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from jwecore.config import get_settings
from jwecore.core.jwk import Jwk


@pytest.fixture(scope="session")
def rsa_private_key():
    """RSA-2048 key pair shared by the whole session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def small_rsa_private_key():
    """RSA-1024 key pair, below the accepted minimum."""
    return rsa.generate_private_key(public_exponent=65537, key_size=1024)


@pytest.fixture
def private_jwk(rsa_private_key):
    """Private RSA JWK with a key id."""
    return Jwk.from_rsa_key(rsa_private_key, kid="test-key")


@pytest.fixture
def public_jwk(rsa_private_key):
    """Public RSA JWK with a key id."""
    return Jwk.from_rsa_key(rsa_private_key.public_key(), kid="test-key")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
