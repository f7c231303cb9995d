"""会话令牌与密码哈希"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from app.core.config import settings, DEFAULT_JWT_SECRET

logger = logging.getLogger(__name__)

CUSTOMER_ROLE = "customer"
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Identity:
    """从会话令牌解析出的调用方身份"""
    id: int
    role: str
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None


def warn_if_default_secret():
    if settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("⚠️  JWT_SECRET 使用默认值，请在环境变量中设置")


# ==================== 密码 ====================

def _password_bytes(password: str) -> bytes:
    # bcrypt 只使用前 72 字节
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # 库里存的不是合法 bcrypt 哈希
        return False


# ==================== 令牌 ====================

def _sign(claims: dict) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def sign_customer_token(customer_id: int, email: str, full_name: str) -> str:
    return _sign({
        "sub": str(customer_id),
        "email": email,
        "name": full_name,
        "role": CUSTOMER_ROLE,
    })


def sign_admin_token(user_id: int, username: str, role: str) -> str:
    return _sign({
        "sub": str(user_id),
        "username": username,
        "role": role,
    })


def decode_token(token: Optional[str]) -> Optional[Identity]:
    """校验令牌，失败返回 None"""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return Identity(
            id=int(payload["sub"]),
            role=payload.get("role", ""),
            email=payload.get("email"),
            name=payload.get("name"),
            username=payload.get("username"),
        )
    except (jwt.PyJWTError, KeyError, ValueError) as e:
        logger.debug(f"令牌校验失败: {e}")
        return None


# ==================== 密码重置令牌 ====================

def generate_reset_token() -> str:
    return secrets.token_hex(24)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
