from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime


class ContactMessageCreate(BaseModel):
    """前台留言"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

    @field_validator("name", "email", "phone", "subject", "message", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ContactMessageStatusUpdate(BaseModel):
    status: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ContactMessageCreated(BaseModel):
    id: int


class ContactMessageSchema(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
