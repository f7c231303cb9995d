"""联系留言服务"""

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session
from typing import List
import logging

from app.models.contact_message import ContactMessage
from app.schemas.contact import ContactMessageCreate

logger = logging.getLogger(__name__)

MESSAGE_LIST_LIMIT = 200


class ContactService:

    def __init__(self, db: Session):
        self.db = db

    def create_message(self, request: ContactMessageCreate) -> ContactMessage:
        if not request.name or not request.email or not request.message:
            raise HTTPException(status_code=400, detail="Name, email, and message are required")

        try:
            message = ContactMessage(
                name=request.name,
                email=str(request.email),
                phone=request.phone,
                subject=request.subject,
                message=request.message,
            )
            self.db.add(message)
            self.db.commit()
            logger.info(f"收到新留言: message_id={message.id}")
            return message
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存留言失败: {str(e)}")
            raise

    def list_messages(self, limit: int = MESSAGE_LIST_LIMIT) -> List[ContactMessage]:
        return self.db.execute(
            select(ContactMessage)
            .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
            .limit(limit)
        ).scalars().all()

    def update_status(self, message_id: int, status: str) -> ContactMessage:
        if not status:
            raise HTTPException(status_code=400, detail="Status is required")

        try:
            message = self.db.get(ContactMessage, message_id)
            if not message:
                raise HTTPException(status_code=404, detail="Message not found")

            message.status = status
            self.db.commit()
            return message
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"更新留言状态失败: message_id={message_id}, error={str(e)}")
            raise
