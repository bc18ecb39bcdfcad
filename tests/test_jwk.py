"""Tests for the JWK accessor."""

import json

import pytest

from jwecore.core.errors import InvalidKeyError
from jwecore.core.jwk import Jwk, b64url_decode, b64url_encode


class TestConstruction:
    """Tests for JWK parsing and common member checks."""

    def test_from_json(self):
        jwk = Jwk.from_json(json.dumps({"kty": "RSA", "kid": "k1", "use": "enc"}))

        assert jwk.key_type() == "RSA"
        assert jwk.key_id() == "k1"
        assert jwk.key_use() == "enc"
        assert jwk.algorithm() is None

    def test_invalid_json(self):
        with pytest.raises(InvalidKeyError):
            Jwk.from_json("{not json")

    def test_json_must_be_object(self):
        with pytest.raises(InvalidKeyError):
            Jwk.from_json("[1, 2]")

    def test_kty_required(self):
        with pytest.raises(InvalidKeyError):
            Jwk.from_dict({"kid": "k1"})

    @pytest.mark.parametrize("member", ["use", "alg", "kid"])
    def test_common_members_must_be_strings(self, member):
        with pytest.raises(InvalidKeyError):
            Jwk({"kty": "RSA", member: 1})

    def test_key_ops_must_be_unique_strings(self):
        with pytest.raises(InvalidKeyError):
            Jwk({"kty": "RSA", "key_ops": "encrypt"})
        with pytest.raises(InvalidKeyError):
            Jwk({"kty": "RSA", "key_ops": ["encrypt", "encrypt"]})


class TestAccessors:
    """Tests for the read-only accessors."""

    def test_key_operations_absent_allows_everything(self):
        jwk = Jwk({"kty": "RSA"})

        assert jwk.key_operations() is None
        assert jwk.is_for_key_operation("wrapKey")

    def test_key_operations_listed(self):
        jwk = Jwk({"kty": "RSA", "key_ops": ["decrypt", "unwrapKey"]})

        assert jwk.is_for_key_operation("unwrapKey")
        assert not jwk.is_for_key_operation("encrypt")

    def test_view_is_read_only(self):
        params = {"kty": "RSA", "n": "AQAB"}
        jwk = Jwk(params)
        params["n"] = "changed"
        jwk.to_dict()["n"] = "changed"

        assert jwk.parameter("n") == "AQAB"
        assert jwk.parameter("missing") is None


class TestRsaExport:
    """Tests for converting cryptography RSA keys."""

    def test_public_key(self, rsa_private_key):
        jwk = Jwk.from_rsa_key(rsa_private_key.public_key(), kid="pub", use="enc")

        assert jwk.to_dict().keys() == {"kty", "n", "e", "kid", "use"}
        assert jwk.parameter("e") == "AQAB"
        assert int.from_bytes(b64url_decode(jwk.parameter("n")), "big") == (
            rsa_private_key.public_key().public_numbers().n
        )

    def test_private_key(self, rsa_private_key):
        jwk = Jwk.from_rsa_key(
            rsa_private_key, alg="RSA-OAEP", key_ops=["decrypt", "unwrapKey"]
        )
        numbers = rsa_private_key.private_numbers()

        for member in ("n", "e", "d", "p", "q", "dp", "dq", "qi"):
            assert jwk.parameter(member)
        assert int.from_bytes(b64url_decode(jwk.parameter("qi")), "big") == numbers.iqmp
        assert jwk.algorithm() == "RSA-OAEP"

    def test_repr_hides_key_material(self, private_jwk):
        assert private_jwk.parameter("d") not in repr(private_jwk)

    def test_unsupported_key_type(self):
        with pytest.raises(InvalidKeyError):
            Jwk.from_rsa_key(b"secret")


class TestBase64Url:
    """Tests for the base64url helpers."""

    def test_round_trip_without_padding(self):
        encoded = b64url_encode(b"\xfb\xff")

        assert encoded == "-_8"
        assert b64url_decode(encoded) == b"\xfb\xff"

    @pytest.mark.parametrize("value", ["AQ==", "+/8", "A", "a b"])
    def test_rejects_non_base64url(self, value):
        with pytest.raises(ValueError):
            b64url_decode(value)
