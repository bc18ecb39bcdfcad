"""Name based lookup of the supported JWE algorithms."""

from jwecore.core.aes_gcm import AesGcmJweEncryption
from jwecore.core.errors import UnsupportedAlgorithmError
from jwecore.core.rsaes import RsaesJweAlgorithm


def get_key_management_algorithm(name: str) -> RsaesJweAlgorithm:
    """Resolve a header ``alg`` value.

    Raises:
        UnsupportedAlgorithmError: If ``name`` is not a supported algorithm
    """
    try:
        return RsaesJweAlgorithm(name)
    except ValueError:
        raise UnsupportedAlgorithmError(f"Unsupported JWE algorithm: {name}") from None


def get_content_encryption(name: str) -> AesGcmJweEncryption:
    """Resolve a header ``enc`` value.

    Raises:
        UnsupportedAlgorithmError: If ``name`` is not a supported encryption
    """
    try:
        return AesGcmJweEncryption(name)
    except ValueError:
        raise UnsupportedAlgorithmError(f"Unsupported encryption: {name}") from None


def key_management_algorithms() -> list[str]:
    """Names of the supported ``alg`` values."""
    return [algorithm.value for algorithm in RsaesJweAlgorithm]


def content_encryptions() -> list[str]:
    """Names of the supported ``enc`` values."""
    return [encryption.value for encryption in AesGcmJweEncryption]
