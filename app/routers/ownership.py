from typing import Any, Type

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import unwrap
from app.core.result import Ok, Result, forbidden, not_found
from app.schemas.user_schema import Identity


def load_owned(db: Session, model: Type[Any], ident: int, identity: Identity, noun: str) -> Result[Any]:
    """Load first, then check ownership; callers mutate only what this returns."""
    entity = db.get(model, ident)
    if entity is None:
        return not_found(f"{noun} not found")
    if entity.owner_id != identity.id:
        return forbidden(f"You are not authorized to modify this {noun.lower()}")
    return Ok(entity)


def fetch_owned(db: Session, model: Type[Any], ident: int, identity: Identity, noun: str) -> Any:
    return unwrap(load_owned(db, model, ident, identity, noun))


def require_text(**fields: str) -> None:
    empty_fields = [name for name, value in fields.items() if value is None or not value.strip()]
    if empty_fields:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"You cannot leave these fields empty: {', '.join(empty_fields)}",
        )
