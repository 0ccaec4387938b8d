"""
Read interface the aggregation views are written against.

The views never issue joins. They only fetch single entities, fetch sets of
entities by id, count edges and list the far ends of edges, so any backend
that can do those four things can serve them. ``SQLStore`` is the
SQLAlchemy-backed implementation used by the app.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Type

from sqlalchemy import func
from sqlalchemy.orm import Session


class Store(Protocol):
    def get(self, model: Type[Any], ident: int) -> Optional[Any]: ...

    def get_many(self, model: Type[Any], idents: Iterable[int]) -> Dict[int, Any]: ...

    def find_one(self, model: Type[Any], **match: Any) -> Optional[Any]: ...

    def count(self, model: Type[Any], **match: Any) -> int: ...

    def exists(self, model: Type[Any], **match: Any) -> bool: ...

    def edge_targets(self, model: Type[Any], column: str, **match: Any) -> List[Any]: ...


class SQLStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, model, ident):
        return self.db.get(model, ident)

    def get_many(self, model, idents):
        wanted = set(idents)
        if not wanted:
            return {}
        rows = self.db.query(model).filter(model.id.in_(wanted)).all()
        return {row.id: row for row in rows}

    def find_one(self, model, **match):
        return self.db.query(model).filter_by(**match).first()

    def count(self, model, **match):
        return self.db.query(func.count(model.id)).filter_by(**match).scalar() or 0

    def exists(self, model, **match):
        return self.db.query(self.db.query(model).filter_by(**match).exists()).scalar()

    def edge_targets(self, model, column, **match):
        """Values of ``column`` over the matching edges, oldest edge first."""
        rows = (
            self.db.query(getattr(model, column))
            .filter_by(**match)
            .order_by(model.id)
            .all()
        )
        return [row[0] for row in rows]
