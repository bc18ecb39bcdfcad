"""JSON Web Key (RFC 7517) accessor.

A read-only view over a JSON key object. Only the common members are
type-checked on construction; algorithm specific members (``n``, ``e``, ...)
are interpreted by the algorithm that consumes the key.
"""

import base64
import json
import re
from typing import Any, Mapping

from cryptography.hazmat.primitives.asymmetric import rsa

from jwecore.core.errors import InvalidKeyError

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """Strict base64url decode: url-safe alphabet only, no padding.

    Raises:
        ValueError: If ``data`` is not unpadded base64url
    """
    if not _B64URL_RE.fullmatch(data) or len(data) % 4 == 1:
        raise ValueError("Value is not base64url without padding")
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _uint_to_b64url(value: int) -> str:
    return b64url_encode(value.to_bytes((value.bit_length() + 7) // 8 or 1, "big"))


class Jwk:
    """JSON Web Key."""

    def __init__(self, params: Mapping[str, Any]):
        kty = params.get("kty")
        if not isinstance(kty, str) or not kty:
            raise InvalidKeyError("A parameter kty is required.")
        for name in ("use", "alg", "kid"):
            if name in params and not isinstance(params[name], str):
                raise InvalidKeyError(f"A parameter {name} must be a string.")
        if "key_ops" in params:
            key_ops = params["key_ops"]
            if not isinstance(key_ops, list) or not all(isinstance(op, str) for op in key_ops):
                raise InvalidKeyError("A parameter key_ops must be a list of strings.")
            if len(set(key_ops)) != len(key_ops):
                raise InvalidKeyError("A parameter key_ops must not contain duplicates.")

        self._params = dict(params)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Jwk":
        """Create from dictionary."""
        return cls(data)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Jwk":
        """Create from a JSON document."""
        try:
            params = json.loads(data)
        except ValueError as e:
            raise InvalidKeyError(f"JWK is not valid JSON: {e}") from e
        if not isinstance(params, dict):
            raise InvalidKeyError("JWK must be a JSON object.")
        return cls(params)

    @classmethod
    def from_rsa_key(
        cls,
        key: rsa.RSAPrivateKey | rsa.RSAPublicKey,
        kid: str | None = None,
        use: str | None = None,
        alg: str | None = None,
        key_ops: list[str] | None = None,
    ) -> "Jwk":
        """Convert a cryptography RSA key to a JWK.

        Private keys export the full CRT parameter set; public keys export
        ``n`` and ``e`` only.
        """
        if isinstance(key, rsa.RSAPrivateKey):
            private_numbers = key.private_numbers()
            public_numbers = private_numbers.public_numbers
        elif isinstance(key, rsa.RSAPublicKey):
            private_numbers = None
            public_numbers = key.public_numbers()
        else:
            raise InvalidKeyError(f"Unsupported key type: {type(key)}")

        params: dict[str, Any] = {
            "kty": "RSA",
            "n": _uint_to_b64url(public_numbers.n),
            "e": _uint_to_b64url(public_numbers.e),
        }
        if private_numbers is not None:
            params.update(
                d=_uint_to_b64url(private_numbers.d),
                p=_uint_to_b64url(private_numbers.p),
                q=_uint_to_b64url(private_numbers.q),
                dp=_uint_to_b64url(private_numbers.dmp1),
                dq=_uint_to_b64url(private_numbers.dmq1),
                qi=_uint_to_b64url(private_numbers.iqmp),
            )
        if use is not None:
            params["use"] = use
        if key_ops is not None:
            params["key_ops"] = list(key_ops)
        if alg is not None:
            params["alg"] = alg
        if kid is not None:
            params["kid"] = kid
        return cls(params)

    def key_type(self) -> str:
        return self._params["kty"]

    def key_use(self) -> str | None:
        return self._params.get("use")

    def key_operations(self) -> list[str] | None:
        key_ops = self._params.get("key_ops")
        return list(key_ops) if key_ops is not None else None

    def is_for_key_operation(self, key_operation: str) -> bool:
        """True if ``key_ops`` is absent or lists ``key_operation``."""
        key_ops = self._params.get("key_ops")
        return key_ops is None or key_operation in key_ops

    def algorithm(self) -> str | None:
        return self._params.get("alg")

    def key_id(self) -> str | None:
        return self._params.get("kid")

    def parameter(self, name: str) -> Any | None:
        return self._params.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of the key members."""
        return dict(self._params)

    def __repr__(self) -> str:
        # Key material stays out of reprs and logs
        return f"Jwk(kty={self.key_type()!r}, kid={self.key_id()!r}, alg={self.algorithm()!r})"
