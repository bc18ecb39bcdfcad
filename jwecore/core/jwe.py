"""JWE algorithm contracts.

Key-management algorithms hand out a bound :class:`JweEncrypter` (sender) or
:class:`JweDecrypter` (receiver); content-encryption algorithms are stateless
transforms. Algorithm identities are ``str`` Enums whose value is the RFC 7518
name, so the protocols below only need ``value``.
"""

import copy
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from jwecore.core.header import JweHeader
from jwecore.core.jwk import Jwk


@runtime_checkable
class JweAlgorithm(Protocol):
    """A key-management algorithm identity."""

    @property
    def value(self) -> str: ...

    def encrypter_from_jwk(self, jwk: Jwk) -> "JweEncrypter": ...

    def decrypter_from_jwk(self, jwk: Jwk) -> "JweDecrypter": ...


@runtime_checkable
class JweContentEncryption(Protocol):
    """A content-encryption (AEAD) algorithm identity."""

    @property
    def value(self) -> str: ...

    @property
    def key_len(self) -> int: ...

    @property
    def iv_len(self) -> int: ...

    def encrypt(
        self, key: bytes, iv: bytes | None, message: bytes, aad: bytes
    ) -> tuple[bytes, bytes | None]: ...

    def decrypt(
        self, key: bytes, iv: bytes | None, encrypted_message: bytes, aad: bytes, tag: bytes | None
    ) -> bytes: ...


class _KeyIdMixin:
    """Advisory key id correlating a bound key with a header ``kid``."""

    _key_id: str | None

    @property
    def key_id(self) -> str | None:
        return self._key_id

    @key_id.setter
    def key_id(self, value: str | None) -> None:
        self._key_id = value

    def remove_key_id(self) -> None:
        self._key_id = None

    def copy(self):
        """Return an independent duplicate sharing only the immutable key."""
        return copy.copy(self)


class JweEncrypter(_KeyIdMixin, ABC):
    """Sender side of a key-management algorithm bound to a key."""

    @property
    @abstractmethod
    def algorithm(self) -> JweAlgorithm:
        """Algorithm this encrypter is bound to."""

    @abstractmethod
    def encrypt(self, header: JweHeader, key_len: int) -> tuple[bytes, bytes | None]:
        """Produce a content encryption key.

        Args:
            header: Message header; ``alg`` is set on success
            key_len: Length of the content encryption key in bytes

        Returns:
            Tuple of (content encryption key, encrypted key or None)
        """


class JweDecrypter(_KeyIdMixin, ABC):
    """Receiver side of a key-management algorithm bound to a key."""

    @property
    @abstractmethod
    def algorithm(self) -> JweAlgorithm:
        """Algorithm this decrypter is bound to."""

    @abstractmethod
    def decrypt(self, header: JweHeader, encrypted_key: bytes | None, key_len: int) -> bytes:
        """Recover the content encryption key.

        Args:
            header: Message header
            encrypted_key: The JWE Encrypted Key, if the message carries one
            key_len: Expected length of the content encryption key in bytes

        Returns:
            The content encryption key
        """
