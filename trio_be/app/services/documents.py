"""Thin list/create/update/delete access to the products and orders collections."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A storage call failed; the session has been rolled back."""


class DocumentCollection:
    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _column(self, field: str):
        column = self.model.__table__.columns.get(field)
        if column is None:
            raise ValueError(f"Unknown field {field!r} for {self.model.__tablename__}")
        return getattr(self.model, field)

    def _fail(self, action: str, e: SQLAlchemyError):
        self.db.rollback()
        logger.exception("Failed to %s %s", action, self.model.__tablename__)
        raise BackendError(f"Failed to {action} {self.model.__tablename__}") from e

    def list(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        query = self.db.query(self.model)
        for field, value in (where or {}).items():
            query = query.filter(self._column(field) == value)
        direction = "desc"
        for field, direction in (order_by or {}).items():
            if direction not in ("asc", "desc"):
                raise ValueError(f"Invalid sort direction {direction!r}")
            column = self._column(field)
            query = query.order_by(column.desc() if direction == "desc" else column.asc())
        # Stable order for equal keys
        query = query.order_by(self.model.id.desc() if direction == "desc" else self.model.id.asc())
        if limit is not None:
            query = query.limit(limit)
        try:
            return query.all()
        except SQLAlchemyError as e:
            self._fail("list", e)

    def get(self, id: Any) -> Optional[Any]:
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self._fail("read", e)

    def create(self, values: Dict[str, Any]) -> Any:
        for field in values:
            self._column(field)
        record = self.model(**values)
        self.db.add(record)
        try:
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self._fail("create", e)
        return record.id

    def update(self, id: Any, partial: Dict[str, Any]) -> bool:
        for field in partial:
            self._column(field)
        record = self.get(id)
        if record is None:
            return False
        for field, value in partial.items():
            setattr(record, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("update", e)
        return True

    def delete(self, id: Any) -> bool:
        record = self.get(id)
        if record is None:
            return False
        self.db.delete(record)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("delete", e)
        return True
