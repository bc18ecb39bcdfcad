"""JWE JOSE header (RFC 7516 section 4)."""

from typing import Any


class JweHeader:
    """Mutable per-message JOSE header.

    Only ``alg`` is written by the key-management algorithms; everything else
    belongs to the framing layer.
    """

    def __init__(self, claims: dict[str, Any] | None = None):
        self._claims: dict[str, Any] = dict(claims or {})

    def algorithm(self) -> str | None:
        return self._claims.get("alg")

    def set_algorithm(self, value: str) -> None:
        self._claims["alg"] = value

    def content_encryption(self) -> str | None:
        return self._claims.get("enc")

    def set_content_encryption(self, value: str) -> None:
        self._claims["enc"] = value

    def key_id(self) -> str | None:
        return self._claims.get("kid")

    def set_key_id(self, value: str) -> None:
        self._claims["kid"] = value

    def claim(self, name: str) -> Any | None:
        return self._claims.get(name)

    def set_claim(self, name: str, value: Any) -> None:
        if value is None:
            self._claims.pop(name, None)
        else:
            self._claims[name] = value

    def to_dict(self) -> dict[str, Any]:
        return dict(self._claims)

    def __repr__(self) -> str:
        return f"JweHeader({self._claims!r})"
