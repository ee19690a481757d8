"""
Name: Token Codec Tests

Responsibilities:
  - Issue/decode round trip preserves identity and role bindings
  - Tampered, foreign-secret and expired tokens are rejected
  - get_token_signature extracts the third segment without verification
"""

import time

import jwt
import pytest

from pizza_service.crosscutting.exceptions import UnauthorizedError
from pizza_service.identity.tokens import JWT_ALGORITHM, TokenCodec, get_token_signature
from pizza_service.identity.users import RoleBinding, User

pytestmark = pytest.mark.unit


def _user() -> User:
    return User(
        id=3,
        name="pizza franchisee",
        email="f@jwt.com",
        roles=(RoleBinding.diner(), RoleBinding.franchisee(1)),
    )


class TestTokenCodec:
    def test_decode_returns_issued_identity(self, codec):
        token = codec.issue(_user())
        assert codec.decode(token) == _user()

    def test_two_tokens_for_same_user_differ(self, codec):
        assert codec.issue(_user()) != codec.issue(_user())

    def test_payload_has_no_exp_by_default(self, codec):
        token = codec.issue(_user())
        payload = jwt.decode(token, options={"verify_signature": False})
        assert "exp" not in payload
        assert payload["iat"] <= int(time.time())

    def test_foreign_secret_rejected(self, codec):
        token = TokenCodec("another-secret-another-secret-123").issue(_user())
        with pytest.raises(UnauthorizedError):
            codec.decode(token)

    def test_tampered_signature_rejected(self, codec):
        header, payload, signature = codec.issue(_user()).split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(UnauthorizedError):
            codec.decode(tampered)

    def test_expired_token_rejected(self, codec):
        expired = jwt.encode(
            {"id": 3, "iat": 1, "exp": 2, "roles": []},
            "unit-test-secret-with-enough-length-123",
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(UnauthorizedError, match="expirado"):
            codec.decode(expired)

    def test_missing_id_claim_rejected(self, codec):
        token = jwt.encode(
            {"iat": int(time.time())},
            "unit-test-secret-with-enough-length-123",
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(UnauthorizedError):
            codec.decode(token)

    def test_ttl_adds_exp(self):
        codec = TokenCodec("ttl-secret-ttl-secret-ttl-secret-1", ttl_minutes=5)
        payload = jwt.decode(
            codec.issue(_user()), options={"verify_signature": False}
        )
        assert payload["exp"] > payload["iat"]

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenCodec("")


class TestGetTokenSignature:
    def test_returns_third_segment(self):
        assert get_token_signature("a.b.c") == "c"

    @pytest.mark.parametrize("token", [None, "", "abc", "a.b"])
    def test_missing_signature_is_empty(self, token):
        assert get_token_signature(token) == ""

    def test_does_not_verify(self):
        assert get_token_signature("not.a.real-token") == "real-token"
