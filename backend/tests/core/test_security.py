"""Credentials — password hashing, JWT round trips and reset tokens."""

import hashlib

import pytest

from lamontai.core.errors import AuthenticationError
from lamontai.infrastructure.security import (
    create_access_token,
    decode_access_token,
    generate_reset_token,
    hash_password,
    seconds_until,
    verify_password,
)

SECRET = "unit-test-secret-with-enough-length"


def test_hash_and_verify_password():
    hashed = hash_password("secret123", rounds=4)
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_malformed_hash_is_a_wrong_password():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_round_trip():
    claims = decode_access_token(create_access_token("user-1", SECRET), SECRET)
    assert claims["sub"] == "user-1"
    assert claims["jti"]
    assert claims["exp"] > claims["iat"]


def test_tokens_get_distinct_ids():
    a = decode_access_token(create_access_token("u", SECRET), SECRET)
    b = decode_access_token(create_access_token("u", SECRET), SECRET)
    assert a["jti"] != b["jti"]


def test_expired_token_rejected():
    token = create_access_token("u", SECRET, expires_minutes=-1)
    with pytest.raises(AuthenticationError, match="expired"):
        decode_access_token(token, SECRET)


def test_wrong_secret_rejected():
    token = create_access_token("u", SECRET)
    with pytest.raises(AuthenticationError, match="token failed"):
        decode_access_token(token, "another-secret-of-enough-length!!")


def test_reset_token_pair():
    plain, hashed = generate_reset_token()
    assert len(plain) == 40
    assert hashed == hashlib.sha256(plain.encode()).hexdigest()


def test_seconds_until_never_negative():
    assert seconds_until(0) == 0
