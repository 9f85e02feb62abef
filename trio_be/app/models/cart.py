from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint
from datetime import datetime
from app.models.database import Base


class CartSession(Base):
    """One key/value slot of a shopper's local storage, namespaced by session id."""

    __tablename__ = "cart_sessions"
    __table_args__ = (
        UniqueConstraint("session_id", "key", name="uq_cart_session_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), nullable=False, index=True)
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)
