# product_service/models.py

from sqlalchemy import Column, DateTime, Float, Integer, String

from .db import Base


class Product(Base):
    __tablename__ = "products"
    # Store-assigned sequence; only used to list products in insertion order.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
