"""账户 / 会话相关的请求与响应模型"""

from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from app.schemas.base import CamelSchema


def _blank_to_none(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# ==================== 请求模型 ====================

class SignupRequest(CamelSchema):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("full_name", "email", mode="before")
    @classmethod
    def _strip(cls, value):
        return _blank_to_none(value)


class CustomerLoginRequest(CamelSchema):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value):
        return _blank_to_none(value)


class AdminLoginRequest(CamelSchema):
    username: Optional[str] = None
    password: Optional[str] = None


class PasswordResetRequest(CamelSchema):
    email: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value):
        return _blank_to_none(value)


class PasswordResetConfirm(CamelSchema):
    token: Optional[str] = None
    password: Optional[str] = None


# ==================== 响应模型 ====================

class CustomerProfile(CamelSchema):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class CustomerSessionResponse(CamelSchema):
    user: CustomerProfile


class SignupResponse(CamelSchema):
    id: int
    email: str
    full_name: str


class AdminProfile(CamelSchema):
    id: int
    username: str
    role: str


class AdminSessionResponse(CamelSchema):
    user: AdminProfile


class OkResponse(BaseModel):
    ok: bool = True
