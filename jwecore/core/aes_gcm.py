"""AES-GCM content encryption (RFC 7518 section 5.3).

Stateless AEAD transforms over an already established content encryption key.
The ``cryptography`` AESGCM primitive appends the 16-byte tag to the
ciphertext; JWE carries the two separately, so they are split and rejoined
here.
"""

from enum import Enum

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from jwecore.core.errors import InvalidJWEError, InvalidKeyError

logger = structlog.get_logger(__name__)

IV_SIZE = 12  # 96-bit GCM nonce
TAG_SIZE = 16


class AesGcmJweEncryption(str, Enum):
    """AES-GCM content encryption algorithms."""

    A128GCM = "A128GCM"  # AES GCM using 128-bit key
    A192GCM = "A192GCM"  # AES GCM using 192-bit key
    A256GCM = "A256GCM"  # AES GCM using 256-bit key

    @property
    def key_len(self) -> int:
        return _KEY_SIZES[self]

    @property
    def iv_len(self) -> int:
        return IV_SIZE

    def encrypt(
        self, key: bytes, iv: bytes | None, message: bytes, aad: bytes
    ) -> tuple[bytes, bytes]:
        """Encrypt and authenticate a message.

        Args:
            key: Content encryption key of exactly ``key_len`` bytes
            iv: 12-byte initialization vector
            message: Plaintext
            aad: Additional authenticated data

        Returns:
            Tuple of (ciphertext, 16-byte authentication tag)

        Raises:
            InvalidKeyError: If the key or IV has the wrong length
        """
        self._check_key(key)
        self._check_iv(iv)

        ciphertext_and_tag = AESGCM(key).encrypt(iv, message, aad)
        # Split ciphertext and tag (tag is last 16 bytes)
        return ciphertext_and_tag[:-TAG_SIZE], ciphertext_and_tag[-TAG_SIZE:]

    def decrypt(
        self,
        key: bytes,
        iv: bytes | None,
        encrypted_message: bytes,
        aad: bytes,
        tag: bytes | None,
    ) -> bytes:
        """Verify and decrypt a message.

        Every authentication or cipher failure surfaces as the same
        ``InvalidJWEError``; the cause is not reported.

        Raises:
            InvalidKeyError: If the key has the wrong length
            InvalidJWEError: If the tag is missing or decryption fails
        """
        self._check_key(key)
        if tag is None:
            raise InvalidJWEError("A tag value is required.")

        try:
            self._check_iv(iv)
            # AESGCM takes the tag from the end of the buffer, so the boundary is checked here
            if len(tag) != TAG_SIZE:
                raise ValueError(f"The length of authentication tag must be {TAG_SIZE}.")
            return AESGCM(key).decrypt(iv, encrypted_message + tag, aad)
        except (InvalidTag, InvalidKeyError, ValueError) as exc:
            logger.debug("jwe.content_decrypt_failed", enc=self.value)
            raise InvalidJWEError("The encrypted message cannot be processed.") from exc

    def _check_key(self, key: bytes) -> None:
        expected_len = self.key_len
        if len(key) != expected_len:
            raise InvalidKeyError(
                f"The length of content encryption key must be {expected_len}: {len(key)}"
            )

    def _check_iv(self, iv: bytes | None) -> None:
        if iv is None or len(iv) != IV_SIZE:
            raise InvalidKeyError(f"The length of initialization vector must be {IV_SIZE}.")


_KEY_SIZES = {
    AesGcmJweEncryption.A128GCM: 16,
    AesGcmJweEncryption.A192GCM: 24,
    AesGcmJweEncryption.A256GCM: 32,
}
