"""密码哈希与会话令牌测试"""
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings
from app.core.security import (
    hash_password,
    verify_password,
    sign_customer_token,
    sign_admin_token,
    decode_token,
    generate_reset_token,
    hash_reset_token,
)


class TestPasswords:

    def test_hash_and_verify(self):
        password_hash = hash_password("secret123")

        assert password_hash != "secret123"
        assert verify_password("secret123", password_hash)
        assert not verify_password("secret124", password_hash)

    def test_verify_against_garbage_hash(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_long_password_truncated(self):
        password = "x" * 100
        password_hash = hash_password(password)

        assert verify_password(password, password_hash)


class TestTokens:

    def test_customer_token_round_trip(self):
        identity = decode_token(sign_customer_token(5, "ada@example.com", "Ada"))

        assert identity.id == 5
        assert identity.role == "customer"
        assert identity.email == "ada@example.com"
        assert identity.name == "Ada"

    def test_admin_token_round_trip(self):
        identity = decode_token(sign_admin_token(2, "root", "admin"))

        assert identity.id == 2
        assert identity.role == "admin"
        assert identity.username == "root"

    def test_invalid_tokens(self):
        assert decode_token(None) is None
        assert decode_token("") is None
        assert decode_token("garbage") is None

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "1", "role": "admin"}, "another-secret", algorithm="HS256")

        assert decode_token(token) is None

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode(
            {"sub": "1", "role": "customer", "exp": past},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        assert decode_token(token) is None

    def test_token_without_subject_rejected(self):
        token = jwt.encode({"role": "customer"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

        assert decode_token(token) is None


class TestResetTokens:

    def test_reset_tokens_are_random_and_hashed(self):
        first, second = generate_reset_token(), generate_reset_token()

        assert first != second
        assert len(first) == 48
        assert hash_reset_token(first) == hash_reset_token(first)
        assert hash_reset_token(first) != first
