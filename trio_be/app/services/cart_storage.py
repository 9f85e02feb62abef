from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.cart import CartSession
from app.services.documents import BackendError


class KeyValueStorage(ABC):
    """Persistent string key/value slots, the shape of a browser's localStorage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class DatabaseStorage(KeyValueStorage):
    """Slots stored in the cart_sessions table, one namespace per shopper session."""

    def __init__(self, db: Session, session_id: str):
        self.db = db
        self.session_id = session_id

    def _row(self, key: str) -> Optional[CartSession]:
        return (
            self.db.query(CartSession)
            .filter(CartSession.session_id == self.session_id, CartSession.key == key)
            .first()
        )

    def get(self, key: str) -> Optional[str]:
        try:
            row = self._row(key)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError("Failed to read cart") from e
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        try:
            row = self._row(key)
            if row:
                row.value = value
                # Touch the row even when the value is unchanged so it does not expire
                row.updated_at = datetime.utcnow()
            else:
                self.db.add(CartSession(session_id=self.session_id, key=key, value=value))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError("Failed to save cart") from e

    def remove(self, key: str) -> None:
        try:
            row = self._row(key)
            if row:
                self.db.delete(row)
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError("Failed to clear cart") from e


def prune_cart_sessions(db: Session, max_age: timedelta) -> int:
    """Delete slots not written within max_age and return how many were removed."""
    cutoff = datetime.utcnow() - max_age
    try:
        removed = (
            db.query(CartSession)
            .filter(CartSession.updated_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise BackendError("Failed to prune cart sessions") from e
    return removed
