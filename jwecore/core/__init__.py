"""JWE key management and content encryption algorithms."""

from jwecore.core.aes_gcm import AesGcmJweEncryption
from jwecore.core.errors import (
    InvalidJWEError,
    InvalidKeyError,
    JOSEError,
    UnsupportedAlgorithmError,
)
from jwecore.core.header import JweHeader
from jwecore.core.jwe import JweContentEncryption, JweDecrypter, JweEncrypter
from jwecore.core.jwk import Jwk
from jwecore.core.registry import (
    content_encryptions,
    get_content_encryption,
    get_key_management_algorithm,
    key_management_algorithms,
)
from jwecore.core.rsaes import RsaesJweAlgorithm, RsaesJweDecrypter, RsaesJweEncrypter

__all__ = [
    "AesGcmJweEncryption",
    "InvalidJWEError",
    "InvalidKeyError",
    "JOSEError",
    "JweContentEncryption",
    "JweDecrypter",
    "JweEncrypter",
    "JweHeader",
    "Jwk",
    "RsaesJweAlgorithm",
    "RsaesJweDecrypter",
    "RsaesJweEncrypter",
    "UnsupportedAlgorithmError",
    "content_encryptions",
    "get_content_encryption",
    "get_key_management_algorithm",
    "key_management_algorithms",
]
