"""Journal entry -> sentiment score -> user risk level."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ..core.db import SessionLocal
from ..errors import UpstreamError
from ..models import JournalEntry, User
from ..wellness.risk import risk_from_sentiment
from .sentiment import SentimentClient

logger = logging.getLogger(__name__)


async def analyze_entry(db: Session, sentiment: SentimentClient, entry: JournalEntry, user: User) -> int:
    """Score ``entry`` and move the owner's risk level to the matching tier.

    The score is fetched before anything changes, so a failed call leaves the
    entry and the user untouched.
    """
    score = await sentiment.analyze(entry.entry)
    level = risk_from_sentiment(score)
    entry.sentiment_score = score
    entry.analyzed_at = datetime.utcnow()
    if level != user.risk_level:
        logger.info("Risk level for user %s: %s -> %s (journal sentiment %.2f)", user.id, user.risk_level, level, score)
    user.risk_level = level
    db.commit()
    return level


async def analyze_entry_in_background(sentiment: SentimentClient, entry_id: str, user_id: str) -> None:
    db = SessionLocal()
    try:
        entry = db.query(JournalEntry).filter(JournalEntry.id == entry_id, JournalEntry.user_id == user_id).first()
        user = db.query(User).filter(User.id == user_id).first()
        if entry is None or user is None:
            return
        await analyze_entry(db, sentiment, entry, user)
    except UpstreamError as e:
        # nobody is waiting on this request; the entry stays unanalyzed
        logger.error("Error analyzing sentiment for entry %s: %s", entry_id, e.detail)
    finally:
        db.close()
