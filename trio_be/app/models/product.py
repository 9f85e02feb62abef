from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime
from datetime import datetime
from app.models.database import Base, JSONList


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), index=True)
    price = Column(Float, nullable=False, default=0.0)
    sizes = Column(JSONList)  # List of size labels, e.g. ["S", "M", "L"]
    description = Column(String(2000))
    images = Column(JSONList)  # List of public URLs
    in_stock = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
