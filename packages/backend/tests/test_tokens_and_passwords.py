"""Unit tests for the token codec and password hashing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from gamehound.auth.dependencies import extract_bearer_token
from gamehound.auth.jwt import Identity, TokenCodec, TokenError
from gamehound.auth.password import hash_password, verify_password
from gamehound.config import Settings

SECRET = "unit-test-secret"


@pytest.fixture
def codec():
    return TokenCodec(secret=SECRET, expire_minutes=60, leeway_seconds=30)


# ─── Tokens ──────────────────────────────────────────────


def test_issue_then_verify_returns_claims(codec):
    identity = codec.verify(codec.issue(42, "ann@studio.dev"))
    assert isinstance(identity, Identity)
    assert identity.user_id == 42
    assert identity.email == "ann@studio.dev"
    assert identity.issued_at is not None


def test_token_has_expiry(codec):
    payload = jwt.decode(codec.issue(1, "a@studio.dev"), SECRET, algorithms=["HS256"])
    assert payload["sub"] == "1"
    assert payload["exp"] - payload["iat"] == 60 * 60


def test_verify_rejects_other_secret(codec):
    other = TokenCodec(secret="another-secret")
    with pytest.raises(TokenError):
        codec.verify(other.issue(1, "a@studio.dev"))


def test_verify_rejects_garbage(codec):
    with pytest.raises(TokenError):
        codec.verify("definitely-not-a-token")


def test_verify_rejects_expired(codec):
    token = codec.issue(1, "a@studio.dev", expires_minutes=-5)
    with pytest.raises(TokenError, match="expired"):
        codec.verify(token)


def test_verify_tolerates_clock_skew_within_leeway(codec):
    token = jwt.encode(
        {
            "sub": "7",
            "email": "skew@studio.dev",
            "exp": datetime.now(timezone.utc) - timedelta(seconds=10),
        },
        SECRET,
        algorithm="HS256",
    )
    assert codec.verify(token).user_id == 7


def test_verify_rejects_missing_email_claim(codec):
    token = jwt.encode(
        {"sub": "7", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        codec.verify(token)


def test_verify_rejects_missing_exp(codec):
    token = jwt.encode({"sub": "7", "email": "x@studio.dev"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        codec.verify(token)


def test_codec_from_settings():
    settings = Settings(
        jwt_secret="from-settings",
        access_token_expire_minutes=5,
        jwt_leeway_seconds=0,
    )
    codec = TokenCodec.from_settings(settings)
    assert codec.secret == "from-settings"
    assert codec.expire_minutes == 5
    assert codec.leeway_seconds == 0


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("Bearer    ", None),
        ("bearer abc", None),
        ("Basic abc", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


# ─── Passwords ───────────────────────────────────────────


def test_hash_password_is_salted():
    h1 = hash_password("same-password", rounds=4)
    h2 = hash_password("same-password", rounds=4)
    assert h1 != h2
    assert h1.startswith("$2b$04$")


def test_verify_password():
    hashed = hash_password("correct horse", rounds=4)
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


def test_verify_password_with_malformed_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_long_password_is_truncated_not_rejected():
    long_pw = "x" * 100
    hashed = hash_password(long_pw, rounds=4)
    assert verify_password(long_pw, hashed) is True
