from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity
from app.database import get_db
from app.models.tweet import Tweet
from app.models.user import User
from app.routers.ownership import fetch_owned, require_text
from app.schemas.content_schema import ContentIn, TweetOut
from app.schemas.user_schema import Identity

router = APIRouter(prefix="/api/tweets", tags=["Tweets"])


@router.post("/", response_model=TweetOut, status_code=status.HTTP_201_CREATED)
def create_tweet(payload: ContentIn, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    require_text(content=payload.content)
    tweet = Tweet(owner_id=identity.id, content=payload.content.strip())
    db.add(tweet)
    db.commit()
    db.refresh(tweet)
    return tweet


@router.get("/user/{user_id}", response_model=list[TweetOut])
def get_user_tweets(user_id: int, db: Session = Depends(get_db)):
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return db.query(Tweet).filter(Tweet.owner_id == user_id).order_by(Tweet.id.desc()).all()


@router.patch("/{tweet_id}", response_model=TweetOut)
def update_tweet(tweet_id: int, payload: ContentIn, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    require_text(content=payload.content)
    tweet = fetch_owned(db, Tweet, tweet_id, identity, "Tweet")
    tweet.content = payload.content.strip()
    db.commit()
    db.refresh(tweet)
    return tweet


@router.delete("/{tweet_id}")
def delete_tweet(tweet_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    tweet = fetch_owned(db, Tweet, tweet_id, identity, "Tweet")
    db.delete(tweet)
    db.commit()
    return {"message": "Tweet deleted successfully"}
