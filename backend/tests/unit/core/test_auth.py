from datetime import datetime, timedelta, timezone

import jwt
import pytest

import auth


def test_create_token_round_trips_with_same_secret():
    token = auth.create_token("secret-a")

    assert auth.verify_token(token, "secret-a") is True
    assert auth.verify_token(token, "secret-b") is False


def test_verify_token_rejects_expired_and_foreign_subject():
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {"sub": auth.TOKEN_SUBJECT, "iat": now - timedelta(days=8), "exp": now - timedelta(days=1)},
        "secret",
        algorithm=auth.JWT_ALGORITHM,
    )
    foreign = jwt.encode(
        {"sub": "someone-else", "iat": now, "exp": now + timedelta(hours=1)},
        "secret",
        algorithm=auth.JWT_ALGORITHM,
    )

    assert auth.verify_token(expired, "secret") is False
    assert auth.verify_token(foreign, "secret") is False


def test_hash_password_enforces_length_limits():
    with pytest.raises(ValueError, match="密码至少需要6个字符"):
        auth.hash_password("12345")
    with pytest.raises(ValueError, match="密码过长"):
        auth.hash_password("密" * 25)

    hashed = auth.hash_password("secret-pass")
    assert auth.verify_password("secret-pass", hashed) is True
    assert auth.verify_password("wrong-pass", hashed) is False
    assert auth.verify_password("secret-pass", "") is False
