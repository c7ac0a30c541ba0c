from sqlalchemy import Column, Integer, String, DateTime, Text, CheckConstraint
from datetime import datetime
from app.db.base_class import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Whole currency units
    price = Column(Integer, nullable=False)
    image = Column(String(500), nullable=False)
    category = Column(String(100), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
