from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    TIMESTAMP,
)
from sqlalchemy.sql import func
from app.db.base import Base


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    subject = Column(String(255), nullable=True)

    message = Column(
        Text,
        nullable=False,
    )

    status = Column(
        String(50),
        nullable=False,
        server_default="new",
        comment="处理状态：new / read / replied",
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
