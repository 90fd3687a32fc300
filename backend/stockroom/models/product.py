from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime
from stockroom.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    sku = Column(String, index=True, nullable=False)
    category = Column(String, index=True, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0.0)
    reorder_level = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Product {self.sku}: {self.name}>"
