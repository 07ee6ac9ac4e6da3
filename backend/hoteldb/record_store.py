# backend/hoteldb/record_store.py
"""
Table-level record store.

Each logical table (items, transactions, ...) is reached through a
`RecordTable` bound to the current session: list / get / upsert /
delete_by_key. There is no query planner here; callers read the rows they
need and compute over them.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from .database import Base

ModelT = TypeVar("ModelT", bound=Base)


class RecordTable(Generic[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT]) -> None:
        self.db = db
        self.model = model
        primary_key = inspect(model).primary_key
        if len(primary_key) != 1:
            raise ValueError(f"{model.__name__} must have a single-column primary key.")
        self.key_attr = primary_key[0].key

    def _key_column(self):
        return getattr(self.model, self.key_attr)

    def list(self, *, order_by: Optional[List[Any]] = None, **filters: Any) -> List[ModelT]:
        query = self.db.query(self.model)
        for name, value in filters.items():
            query = query.filter(getattr(self.model, name) == value)
        if order_by:
            query = query.order_by(*order_by)
        else:
            query = query.order_by(self._key_column())
        return query.all()

    def get(self, key: Any) -> Optional[ModelT]:
        return self.db.get(self.model, key)

    def exists(self, **filters: Any) -> bool:
        query = self.db.query(self._key_column())
        for name, value in filters.items():
            query = query.filter(getattr(self.model, name) == value)
        return query.first() is not None

    def upsert(self, values: Dict[str, Any]) -> ModelT:
        """
        Insert-or-replace keyed by primary key.

        Existing rows keep the columns not present in `values`.
        """
        key = values.get(self.key_attr)
        if key is None:
            raise ValueError(f"upsert into {self.model.__tablename__} requires '{self.key_attr}'.")
        record = self.get(key)
        if record is None:
            record = self.model(**values)
            self.db.add(record)
        else:
            for name, value in values.items():
                if name == self.key_attr:
                    continue
                setattr(record, name, value)
        self.db.flush()
        return record

    def delete_by_key(self, key: Any) -> bool:
        record = self.get(key)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True
