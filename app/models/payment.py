from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base_class import Base
from app.models.order import PaymentMethod


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    # unique enforces one payment per order even under concurrent writers
    order_id = Column(Integer, ForeignKey("orders.id"), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    method = Column(Enum(PaymentMethod), nullable=False)
    amount = Column(Integer, nullable=False)

    card_last4 = Column(String(4), nullable=True)
    card_expiry = Column(String(7), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    order = relationship("Order", back_populates="payment")
    user = relationship("User")

    @property
    def masked_card(self):
        if not self.card_last4:
            return None
        return f"****-****-****-{self.card_last4}"
