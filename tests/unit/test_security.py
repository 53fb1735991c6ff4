"""Unit tests for password hashing and access tokens."""

from datetime import timedelta

from study_portal.core.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("Secret123!")
    assert hashed != "Secret123!"
    assert verify_password("Secret123!", hashed)
    assert not verify_password("wrong", hashed)


def test_long_password_truncated_to_bcrypt_limit():
    hashed = get_password_hash("x" * 100)
    assert verify_password("x" * 72, hashed)


def test_access_token_carries_claims():
    token = create_access_token({"sub": "abc", "role": "STUDENT"})
    payload = decode_token(token)
    assert payload["sub"] == "abc"
    assert payload["type"] == "access"
    assert "exp" in payload


def test_expired_token_decodes_to_none():
    token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-60))
    assert decode_token(token) is None


def test_token_signed_with_other_key_decodes_to_none():
    from jose import jwt

    forged = jwt.encode({"sub": "abc", "type": "access"}, "some-other-key", algorithm="HS256")
    assert decode_token(forged) is None
