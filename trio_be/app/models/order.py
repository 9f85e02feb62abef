from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime
from app.models.database import Base, JSONList


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), unique=True, index=True, nullable=False)  # ORD<epoch millis><3 random digits>

    # customer contact fields
    customer_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(String(1000), nullable=False)

    total_amount = Column(Float, default=0.0)
    status = Column(String(20), default="Pending")  # Pending, Processing, Shipped, Delivered, Cancelled
    # Snapshot of purchased items: productId, quantity, name, price, selectedSize
    items = Column(JSONList)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
