from sqlalchemy import (
    Column,
    Integer,
    String,
    TIMESTAMP,
    ForeignKey,
    Index,
)
from sqlalchemy.sql import func
from app.db.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    full_name = Column(
        String(255),
        nullable=False,
    )

    # 统一存小写
    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="登录邮箱",
    )

    password_hash = Column(
        String(255),
        nullable=False,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class AdminUser(Base):
    __tablename__ = "users"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    username = Column(
        String(255),
        nullable=False,
        unique=True,
    )

    password_hash = Column(
        String(255),
        nullable=False,
    )

    role = Column(
        String(50),
        nullable=False,
        server_default="admin",
        comment="后台角色",
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class PasswordReset(Base):
    __tablename__ = "password_resets"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # 只存 sha256，不存明文 token
    token_hash = Column(
        String(255),
        nullable=False,
        comment="重置令牌哈希",
    )

    expires_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        comment="过期时间",
    )

    used_at = Column(
        TIMESTAMP(timezone=True),
        nullable=True,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


Index(
    "idx_password_resets_token_hash",
    PasswordReset.token_hash,
)

Index(
    "idx_password_resets_expires_at",
    PasswordReset.expires_at,
)
