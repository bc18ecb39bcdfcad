"""JOSE error taxonomy.

Every failure raised by the key-management and content-encryption
algorithms is one of the classes below. Lower level exceptions from
``cryptography`` or ``pyasn1`` are chained as ``__cause__``.
"""


class JOSEError(Exception):
    """Base JOSE exception."""

    pass


class InvalidKeyError(JOSEError):
    """Key material is missing, malformed, unsuitable or cannot be used."""

    pass


class InvalidJWEError(JOSEError):
    """JWE is invalid or decryption failed."""

    pass


class UnsupportedAlgorithmError(JOSEError):
    """Algorithm not supported."""

    pass
