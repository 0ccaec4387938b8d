from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity
from app.core.errors import unwrap
from app.database import get_db
from app.schemas.content_schema import ToggleResult
from app.schemas.user_schema import Identity, OwnerSummary
from app.services import aggregation, edges
from app.store import SQLStore

router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])


@router.post("/c/{channel_id}", response_model=ToggleResult)
def toggle_subscription(channel_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return ToggleResult(active=unwrap(edges.toggle_subscription(db, identity, channel_id)))


@router.get("/c/{channel_id}", response_model=list[OwnerSummary])
def get_channel_subscribers(channel_id: int, db: Session = Depends(get_db)):
    return unwrap(aggregation.channel_subscribers(SQLStore(db), channel_id))


@router.get("/u/{subscriber_id}", response_model=list[OwnerSummary])
def get_subscribed_channels(subscriber_id: int, db: Session = Depends(get_db)):
    return unwrap(aggregation.subscribed_channels(SQLStore(db), subscriber_id))
