from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base_class import Base


class CardInfo(Base):
    """Card on file per user. Only the last four digits are ever stored."""

    __tablename__ = "card_info"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    user_name = Column(String(100), nullable=False)
    user_email = Column(String(255), nullable=False)

    card_last4 = Column(String(4), nullable=False)
    expiry = Column(String(7), nullable=False)

    last_used = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="card_info")

    @property
    def masked_card(self) -> str:
        return f"****-****-****-{self.card_last4}"
