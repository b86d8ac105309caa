"""Tests for bearer token decoding."""

import pytest
from jose import jwt

from member_stats.auth.tokens import InvalidTokenError, decode_token, user_from_claims

SECRET = "test-secret"


def sign(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


class TestDecodeToken:

    def test_user_token_with_namespaced_claims(self):
        user = decode_token(sign({
            "sub": "auth0|1001",
            "https://topcoder-dev.com/handle": "alice",
            "https://topcoder-dev.com/userId": "1001",
            "https://topcoder-dev.com/roles": ["Topcoder User"],
        }), secret=SECRET)

        assert user.handle == "alice"
        assert user.user_id == 1001
        assert user.roles == ["Topcoder User"]
        assert user.is_machine is False
        assert user.actor == "alice"

    def test_machine_token(self):
        user = decode_token(sign({
            "sub": "svc@clients",
            "gty": "client-credentials",
            "scope": "read:user_profiles write:user_profiles",
        }), secret=SECRET)

        assert user.is_machine is True
        assert user.handle is None
        assert user.scopes == ["read:user_profiles", "write:user_profiles"]

    def test_wrong_secret(self):
        with pytest.raises(InvalidTokenError):
            decode_token(sign({"sub": "x"}, secret="other"), secret=SECRET)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_token("not-a-jwt", secret=SECRET)

    def test_issuer_must_be_listed(self, monkeypatch):
        from member_stats.core.config import settings
        monkeypatch.setattr(settings, "VALID_ISSUERS", ["https://api.topcoder.com"])

        with pytest.raises(InvalidTokenError, match="Invalid issuer"):
            decode_token(sign({"sub": "x", "iss": "https://evil.example"}), secret=SECRET)

    def test_signed_token_with_bad_user_id(self):
        with pytest.raises(InvalidTokenError):
            decode_token(sign({"sub": "x", "handle": "alice", "userId": "abc"}), secret=SECRET)


class TestUserFromClaims:

    def test_bare_claim_names(self):
        user = user_from_claims({"sub": "s", "handle": "bob", "roles": ["admin"]})

        assert user.handle == "bob"
        assert user.roles == ["admin"]
        assert user.user_id is None

    def test_non_numeric_user_id_is_invalid(self):
        with pytest.raises(InvalidTokenError, match="Invalid userId claim"):
            user_from_claims({"sub": "s", "handle": "bob", "userId": "abc"})

    def test_machine_token_ignores_user_id(self):
        user = user_from_claims({"sub": "svc", "gty": "client-credentials", "userId": "abc"})

        assert user.is_machine is True
        assert user.user_id is None
