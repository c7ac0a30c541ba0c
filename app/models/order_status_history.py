from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base_class import Base


class OrderStatusHistory(Base):
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    old_status = Column(String(20), nullable=True)  # null for the creation entry
    new_status = Column(String(20), nullable=False)

    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True)  # null for system changes
    reason = Column(String(50), nullable=True)  # placed / payment / admin

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    order = relationship("Order", back_populates="status_history")
