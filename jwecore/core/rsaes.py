"""RSAES key management algorithms (RFC 7518 section 4.2 and 4.3).

Supported algorithms:
- RSA1_5 (RSAES-PKCS1-v1_5) - no longer recommended
- RSA-OAEP (RSAES OAEP using SHA-1 and MGF1 with SHA-1)
- RSA-OAEP-256, RSA-OAEP-384, RSA-OAEP-512 (OAEP and MGF1 with the same SHA-2)

Keys arrive as JWKs. The individual numeric members are assembled into a
PKCS#1 key, wrapped in a PKCS#8 container whose AlgorithmIdentifier names the
variant (rsaEncryption, or id-RSAES-OAEP with explicit RSAES-OAEP-params), and
then loaded into a ``cryptography`` key handle.
"""

import os
from enum import Enum

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from pyasn1.codec.der import decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ
from pyasn1_modules import rfc3447, rfc5208, rfc5280

from jwecore.config import get_settings
from jwecore.core.der import DerBuilder, DerClass
from jwecore.core.errors import InvalidJWEError, InvalidKeyError, UnsupportedAlgorithmError
from jwecore.core.header import JweHeader
from jwecore.core.jwe import JweDecrypter, JweEncrypter
from jwecore.core.jwk import Jwk, b64url_decode
from jwecore.core.oid import (
    OID_MGF1,
    OID_P_SPECIFIED,
    OID_RSA_ENCRYPTION,
    OID_RSAES_OAEP,
    OID_SHA1,
    OID_SHA256,
    OID_SHA384,
    OID_SHA512,
)

logger = structlog.get_logger(__name__)

# JWK members of an RSA private key, in RSAPrivateKey order after the version
_PRIVATE_KEY_MEMBERS = ("n", "e", "d", "p", "q", "dp", "dq", "qi")


class RsaesJweAlgorithm(str, Enum):
    """RSAES key management algorithms."""

    RSA1_5 = "RSA1_5"  # RSAES-PKCS1-v1_5
    RSA_OAEP = "RSA-OAEP"  # OAEP with SHA-1 / MGF1-SHA-1
    RSA_OAEP_256 = "RSA-OAEP-256"  # OAEP with SHA-256 / MGF1-SHA-256
    RSA_OAEP_384 = "RSA-OAEP-384"  # OAEP with SHA-384 / MGF1-SHA-384
    RSA_OAEP_512 = "RSA-OAEP-512"  # OAEP with SHA-512 / MGF1-SHA-512

    # ==================== Factories ====================

    def encrypter_from_jwk(self, jwk: Jwk) -> "RsaesJweEncrypter":
        """Create an encrypter from a public (or private) RSA JWK.

        Args:
            jwk: Key with ``kty`` RSA and the members ``n`` and ``e``

        Returns:
            RsaesJweEncrypter bound to this algorithm

        Raises:
            InvalidKeyError: If the key is unsuitable, malformed or too small
        """
        try:
            self._check_jwk(jwk, ("encrypt", "wrapKey"))
            n, e = (_uint_member(jwk, name) for name in ("n", "e"))

            builder = DerBuilder()
            with builder.sequence():
                builder.append_integer_from_be_slice(n)  # n
                builder.append_integer_from_be_slice(e)  # e

            public_key = self._load_public_pkcs8(self.to_pkcs8(builder.build(), is_public=True))
            self._check_key_size(public_key.key_size)
        except InvalidKeyError as exc:
            logger.info("jwe.key_rejected", alg=self.value, kid=jwk.key_id(), reason=str(exc))
            raise

        return self._bind_encrypter(public_key, jwk.key_id())

    def decrypter_from_jwk(self, jwk: Jwk) -> "RsaesJweDecrypter":
        """Create a decrypter from a private RSA JWK.

        Args:
            jwk: Key with ``kty`` RSA and all of ``n, e, d, p, q, dp, dq, qi``

        Returns:
            RsaesJweDecrypter bound to this algorithm

        Raises:
            InvalidKeyError: If the key is unsuitable, malformed or too small
        """
        try:
            self._check_jwk(jwk, ("decrypt", "unwrapKey"))
            members = [_uint_member(jwk, name) for name in _PRIVATE_KEY_MEMBERS]

            builder = DerBuilder()
            with builder.sequence():
                builder.append_integer_from_int(0)  # version
                for value in members:  # n, e, d, p, q, d mod (p-1), d mod (q-1), q^-1 mod p
                    builder.append_integer_from_be_slice(value)

            private_key = self._load_private_pkcs8(self.to_pkcs8(builder.build(), is_public=False))
            self._check_key_size(private_key.key_size)
        except InvalidKeyError as exc:
            logger.info("jwe.key_rejected", alg=self.value, kid=jwk.key_id(), reason=str(exc))
            raise

        return self._bind_decrypter(private_key, jwk.key_id())

    def encrypter_from_der(self, data: bytes, kid: str | None = None) -> "RsaesJweEncrypter":
        """Create an encrypter from a DER SubjectPublicKeyInfo or PKCS#1 RSA public key."""
        try:
            public_key = serialization.load_der_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load public key: {exc}") from exc
        return self._encrypter_from_key(public_key, kid)

    def encrypter_from_pem(self, data: bytes | str, kid: str | None = None) -> "RsaesJweEncrypter":
        """Create an encrypter from a PEM encoded RSA public key."""
        if isinstance(data, str):
            data = data.encode("ascii")
        try:
            public_key = serialization.load_pem_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load public key: {exc}") from exc
        return self._encrypter_from_key(public_key, kid)

    def decrypter_from_der(self, data: bytes, kid: str | None = None) -> "RsaesJweDecrypter":
        """Create a decrypter from an unencrypted DER PKCS#8 or PKCS#1 RSA private key."""
        try:
            private_key = serialization.load_der_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load private key: {exc}") from exc
        return self._decrypter_from_key(private_key, kid)

    def decrypter_from_pem(self, data: bytes | str, kid: str | None = None) -> "RsaesJweDecrypter":
        """Create a decrypter from an unencrypted PEM encoded RSA private key."""
        if isinstance(data, str):
            data = data.encode("ascii")
        try:
            private_key = serialization.load_pem_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load private key: {exc}") from exc
        return self._decrypter_from_key(private_key, kid)

    # ==================== Algorithm parameters ====================

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """OAEP digest (also used by MGF1)."""
        if self is RsaesJweAlgorithm.RSA1_5:
            raise UnsupportedAlgorithmError("RSA1_5 does not use a hash function")
        return _HASH_ALGORITHMS[self]()

    def encryption_padding(self) -> padding.AsymmetricPadding:
        if self is RsaesJweAlgorithm.RSA1_5:
            return padding.PKCS1v15()
        hash_algorithm = self.hash_algorithm()
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=hash_algorithm),
            algorithm=hash_algorithm,
            label=None,
        )

    def to_pkcs8(self, key_der: bytes, is_public: bool) -> bytes:
        """Wrap a PKCS#1 key in a PKCS#8 container naming this algorithm.

        Public keys become a SubjectPublicKeyInfo (key as BIT STRING), private
        keys a PrivateKeyInfo (version 0, key as OCTET STRING).
        """
        builder = DerBuilder()
        with builder.sequence():
            if not is_public:
                builder.append_integer_from_int(0)

            with builder.sequence():
                if self is RsaesJweAlgorithm.RSA1_5:
                    builder.append_object_identifier(OID_RSA_ENCRYPTION)
                else:
                    builder.append_object_identifier(OID_RSAES_OAEP)
                self._append_algorithm_parameters(builder)

            if is_public:
                builder.append_bit_string_from_slice(key_der, 0)
            else:
                builder.append_octet_string_from_slice(key_der)

        return builder.build()

    def _append_algorithm_parameters(self, builder: DerBuilder) -> None:
        if self is RsaesJweAlgorithm.RSA1_5:
            builder.append_null()
            return

        hash_oid = _HASH_OIDS[self]
        # RSAES-OAEP-params (RFC 8017 appendix A.2.1)
        with builder.sequence():
            with builder.tagged(DerClass.CONTEXT_SPECIFIC, 0):  # hashFunc
                with builder.sequence():
                    builder.append_object_identifier(hash_oid)

            with builder.tagged(DerClass.CONTEXT_SPECIFIC, 1):  # maskGenFunc
                with builder.sequence():
                    builder.append_object_identifier(OID_MGF1)
                    with builder.sequence():
                        builder.append_object_identifier(hash_oid)

            with builder.tagged(DerClass.CONTEXT_SPECIFIC, 2):  # pSourceFunc
                with builder.sequence():
                    builder.append_object_identifier(OID_P_SPECIFIED)
                    builder.append_octet_string_from_slice(b"")

    def _algorithm_parameters_der(self) -> bytes:
        builder = DerBuilder()
        self._append_algorithm_parameters(builder)
        return builder.build()

    # ==================== Validation and loading ====================

    def _check_jwk(self, jwk: Jwk, key_operations: tuple[str, str]) -> None:
        if jwk.key_type() != "RSA":
            raise InvalidKeyError(f"A parameter kty must be RSA: {jwk.key_type()}")

        key_use = jwk.key_use()
        if key_use is not None and key_use != "enc":
            raise InvalidKeyError(f"A parameter use must be enc: {key_use}")

        if not all(jwk.is_for_key_operation(op) for op in key_operations):
            raise InvalidKeyError(
                f"A parameter key_ops must contains {key_operations[0]} and {key_operations[1]}."
            )

        alg = jwk.algorithm()
        if alg is not None and alg != self.value:
            raise InvalidKeyError(f"A parameter alg must be {self.value} but {alg}")

    def _check_algorithm_identifier(self, algorithm_identifier: univ.Sequence) -> None:
        expected_oid = OID_RSA_ENCRYPTION if self is RsaesJweAlgorithm.RSA1_5 else OID_RSAES_OAEP
        if algorithm_identifier["algorithm"] != expected_oid:
            raise InvalidKeyError(f"Unexpected key algorithm: {algorithm_identifier['algorithm']}")
        parameters = algorithm_identifier["parameters"]
        if not parameters.isValue or parameters.asOctets() != self._algorithm_parameters_der():
            raise InvalidKeyError(f"Key algorithm parameters do not match {self.value}")

    def _load_public_pkcs8(self, pkcs8: bytes) -> rsa.RSAPublicKey:
        try:
            spki, rest = decoder.decode(pkcs8, asn1Spec=rfc5280.SubjectPublicKeyInfo())
            if rest:
                raise InvalidKeyError("Trailing data after SubjectPublicKeyInfo")
            self._check_algorithm_identifier(spki["algorithm"])

            rsa_key, rest = decoder.decode(
                spki["subjectPublicKey"].asOctets(), asn1Spec=rfc3447.RSAPublicKey()
            )
            if rest:
                raise InvalidKeyError("Trailing data after RSAPublicKey")
            return rsa.RSAPublicNumbers(
                e=int(rsa_key["publicExponent"]),
                n=int(rsa_key["modulus"]),
            ).public_key()
        except (PyAsn1Error, ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load public key: {exc}") from exc

    def _load_private_pkcs8(self, pkcs8: bytes) -> rsa.RSAPrivateKey:
        try:
            info, rest = decoder.decode(pkcs8, asn1Spec=rfc5208.PrivateKeyInfo())
            if rest:
                raise InvalidKeyError("Trailing data after PrivateKeyInfo")
            if int(info["version"]) != 0:
                raise InvalidKeyError(f"Unsupported PrivateKeyInfo version: {int(info['version'])}")
            self._check_algorithm_identifier(info["privateKeyAlgorithm"])

            rsa_key, rest = decoder.decode(
                info["privateKey"].asOctets(), asn1Spec=rfc3447.RSAPrivateKey()
            )
            if rest:
                raise InvalidKeyError("Trailing data after RSAPrivateKey")
            public_numbers = rsa.RSAPublicNumbers(
                e=int(rsa_key["publicExponent"]),
                n=int(rsa_key["modulus"]),
            )
            return rsa.RSAPrivateNumbers(
                p=int(rsa_key["prime1"]),
                q=int(rsa_key["prime2"]),
                d=int(rsa_key["privateExponent"]),
                dmp1=int(rsa_key["exponent1"]),
                dmq1=int(rsa_key["exponent2"]),
                iqmp=int(rsa_key["coefficient"]),
                public_numbers=public_numbers,
            ).private_key()
        except (PyAsn1Error, ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to load private key: {exc}") from exc

    def _check_key_size(self, key_size: int) -> None:
        min_bits = get_settings().min_rsa_key_bits
        if key_size < min_bits:
            raise InvalidKeyError(f"key length must be {min_bits} or more.")

    # ==================== Binding ====================

    def _encrypter_from_key(self, key, kid: str | None) -> "RsaesJweEncrypter":
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidKeyError(f"A key type must be RSA: {type(key).__name__}")
        self._check_key_size(key.key_size)
        return self._bind_encrypter(key, kid)

    def _decrypter_from_key(self, key, kid: str | None) -> "RsaesJweDecrypter":
        if not isinstance(key, rsa.RSAPrivateKey):
            raise InvalidKeyError(f"A key type must be RSA: {type(key).__name__}")
        self._check_key_size(key.key_size)
        return self._bind_decrypter(key, kid)

    def _bind_encrypter(self, public_key: rsa.RSAPublicKey, kid: str | None) -> "RsaesJweEncrypter":
        self._warn_if_deprecated()
        logger.debug("jwe.encrypter_created", alg=self.value, kid=kid, key_size=public_key.key_size)
        return RsaesJweEncrypter(self, public_key, kid)

    def _bind_decrypter(self, private_key: rsa.RSAPrivateKey, kid: str | None) -> "RsaesJweDecrypter":
        self._warn_if_deprecated()
        logger.debug("jwe.decrypter_created", alg=self.value, kid=kid, key_size=private_key.key_size)
        return RsaesJweDecrypter(self, private_key, kid)

    def _warn_if_deprecated(self) -> None:
        if self is RsaesJweAlgorithm.RSA1_5:
            logger.warning("jwe.algorithm_deprecated", alg=self.value)


_HASH_ALGORITHMS = {
    RsaesJweAlgorithm.RSA_OAEP: hashes.SHA1,
    RsaesJweAlgorithm.RSA_OAEP_256: hashes.SHA256,
    RsaesJweAlgorithm.RSA_OAEP_384: hashes.SHA384,
    RsaesJweAlgorithm.RSA_OAEP_512: hashes.SHA512,
}

_HASH_OIDS = {
    RsaesJweAlgorithm.RSA_OAEP: OID_SHA1,
    RsaesJweAlgorithm.RSA_OAEP_256: OID_SHA256,
    RsaesJweAlgorithm.RSA_OAEP_384: OID_SHA384,
    RsaesJweAlgorithm.RSA_OAEP_512: OID_SHA512,
}


def _uint_member(jwk: Jwk, name: str) -> bytes:
    """Decode a base64url unsigned big-endian JWK member."""
    value = jwk.parameter(name)
    if value is None:
        raise InvalidKeyError(f"A parameter {name} is required.")
    if not isinstance(value, str):
        raise InvalidKeyError(f"A parameter {name} must be a string.")
    try:
        data = b64url_decode(value)
    except ValueError as exc:
        raise InvalidKeyError(f"A parameter {name} must be base64url without padding.") from exc
    if not data:
        raise InvalidKeyError(f"A parameter {name} must not be empty.")
    return data


class RsaesJweEncrypter(JweEncrypter):
    """RSAES encrypter bound to a public key."""

    def __init__(
        self,
        algorithm: RsaesJweAlgorithm,
        public_key: rsa.RSAPublicKey,
        key_id: str | None = None,
    ):
        self._algorithm = algorithm
        self._public_key = public_key
        self._key_id = key_id

    @property
    def algorithm(self) -> RsaesJweAlgorithm:
        return self._algorithm

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._public_key

    def encrypt(self, header: JweHeader, key_len: int) -> tuple[bytes, bytes]:
        """Generate a random CEK and wrap it with the public key.

        The header's ``alg`` is overwritten with this algorithm's name once the
        key has been wrapped; on failure the header is left untouched.

        Raises:
            InvalidKeyError: If the CEK cannot be generated or wrapped
        """
        if key_len <= 0:
            raise InvalidKeyError(f"The key size must be positive: {key_len}")
        try:
            key = os.urandom(key_len)
        except (OSError, NotImplementedError) as exc:
            raise InvalidKeyError("Failed to generate a content encryption key") from exc

        try:
            encrypted_key = self._public_key.encrypt(key, self._algorithm.encryption_padding())
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(f"Failed to encrypt the content encryption key: {exc}") from exc

        header.set_algorithm(self._algorithm.value)
        return key, encrypted_key

    def __repr__(self) -> str:
        return f"RsaesJweEncrypter(algorithm={self._algorithm.value!r}, key_id={self._key_id!r})"


class RsaesJweDecrypter(JweDecrypter):
    """RSAES decrypter bound to a private key."""

    def __init__(
        self,
        algorithm: RsaesJweAlgorithm,
        private_key: rsa.RSAPrivateKey,
        key_id: str | None = None,
    ):
        self._algorithm = algorithm
        self._private_key = private_key
        self._key_id = key_id

    @property
    def algorithm(self) -> RsaesJweAlgorithm:
        return self._algorithm

    def decrypt(self, header: JweHeader, encrypted_key: bytes | None, key_len: int) -> bytes:
        """Unwrap the CEK.

        Raises:
            InvalidJWEError: If the encrypted key is missing, cannot be
                decrypted, or does not decrypt to exactly ``key_len`` bytes
        """
        if encrypted_key is None:
            raise InvalidJWEError("A encrypted_key is required.")

        try:
            key = self._private_key.decrypt(encrypted_key, self._algorithm.encryption_padding())
        except (ValueError, UnsupportedAlgorithm) as exc:
            logger.debug("jwe.decrypt_failed", alg=self._algorithm.value, kid=self._key_id)
            raise InvalidJWEError("Failed to decrypt the encrypted key.") from exc

        if len(key) != key_len:
            logger.debug("jwe.decrypt_failed", alg=self._algorithm.value, kid=self._key_id)
            raise InvalidJWEError(f"The key size is expected to be {key_len}: {len(key)}")

        return key

    def __repr__(self) -> str:
        return f"RsaesJweDecrypter(algorithm={self._algorithm.value!r}, key_id={self._key_id!r})"
