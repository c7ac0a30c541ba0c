from typing import List

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import ContactMessageNotFound
from app.models.contact_message import ContactMessage, ContactMessageStatus
from app.schemas.contact import ContactMessageCreate

logger = structlog.get_logger()


class ContactService:

    @staticmethod
    def submit(db: Session, message_in: ContactMessageCreate) -> ContactMessage:
        message = ContactMessage(
            name=message_in.name,
            email=message_in.email,
            phone=message_in.phone,
            message=message_in.message,
            status=ContactMessageStatus.NEW,
        )
        db.add(message)
        db.commit()
        db.refresh(message)
        logger.info("contact_message_saved", message_id=message.id)
        return message

    @staticmethod
    def list_messages(db: Session) -> List[ContactMessage]:
        return (
            db.query(ContactMessage)
            .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
            .all()
        )

    @staticmethod
    def mark_read(db: Session, message_id: int) -> ContactMessage:
        message = db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
        if not message:
            raise ContactMessageNotFound()

        message.status = ContactMessageStatus.READ
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def serialize(message: ContactMessage) -> dict:
        return {
            "id": message.id,
            "name": message.name,
            "email": message.email,
            "phone": message.phone,
            "message": message.message,
            "status": message.status.value,
            "created_at": message.created_at,
        }
