"""jwecore - RSAES key management and AES-GCM content encryption for JWE."""

from jwecore.core import (
    AesGcmJweEncryption,
    InvalidJWEError,
    InvalidKeyError,
    JOSEError,
    JweHeader,
    Jwk,
    RsaesJweAlgorithm,
    UnsupportedAlgorithmError,
    content_encryptions,
    get_content_encryption,
    get_key_management_algorithm,
    key_management_algorithms,
)

__version__ = "0.1.0"

__all__ = [
    "AesGcmJweEncryption",
    "InvalidJWEError",
    "InvalidKeyError",
    "JOSEError",
    "JweHeader",
    "Jwk",
    "RsaesJweAlgorithm",
    "UnsupportedAlgorithmError",
    "content_encryptions",
    "get_content_encryption",
    "get_key_management_algorithm",
    "key_management_algorithms",
]
