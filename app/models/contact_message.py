from sqlalchemy import Column, Integer, String, DateTime, Enum, Text
from datetime import datetime
import enum
from app.db.base_class import Base


class ContactMessageStatus(str, enum.Enum):
    NEW = "new"
    READ = "read"


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(Enum(ContactMessageStatus), default=ContactMessageStatus.NEW, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
