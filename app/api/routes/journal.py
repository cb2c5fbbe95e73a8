from datetime import datetime
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.db import get_db
from ...models import User, JournalEntry
from ...services.journal_analysis import analyze_entry, analyze_entry_in_background
from ...services.sentiment import SentimentClient
from ..deps import get_current_user, get_sentiment
from ..schemas import JournalIn, JournalPatch, JournalOut, JournalAnalysisOut
from ..views import journal_out, risk_out

router = APIRouter(prefix="/journal", tags=["journal"])

def _own_entry(db: Session, user: User, entry_id: str) -> JournalEntry:
    e = db.query(JournalEntry).filter(JournalEntry.id == entry_id, JournalEntry.user_id == user.id).first()
    if not e:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return e

@router.post("", response_model=JournalOut)
def create_entry(
    payload: JournalIn,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    sentiment: SentimentClient = Depends(get_sentiment),
):
    text = payload.entry.strip()
    if not text:
        raise HTTPException(status_code=422, detail="entry required")
    e = JournalEntry(user_id=user.id, entry=text, mood=(payload.mood or "").strip() or None)
    db.add(e)
    db.commit()
    db.refresh(e)
    if settings.ANALYZE_JOURNAL_ON_CREATE and sentiment.enabled:
        background.add_task(analyze_entry_in_background, sentiment, e.id, user.id)
    return journal_out(e)

@router.get("", response_model=list[JournalOut])
def list_entries(limit: int = Query(50, ge=1, le=200), db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    rows = (
        db.query(JournalEntry)
        .filter(JournalEntry.user_id == user.id)
        .order_by(JournalEntry.created_at.desc())
        .limit(limit)
        .all()
    )
    return [journal_out(e) for e in rows]

@router.patch("/{entry_id}", response_model=JournalOut)
def edit_entry(entry_id: str, payload: JournalPatch, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    e = _own_entry(db, user, entry_id)
    if payload.entry is not None:
        text = payload.entry.strip()
        if not text:
            raise HTTPException(status_code=422, detail="entry required")
        if text != e.entry:
            e.entry = text
            # the old score no longer describes this text
            e.sentiment_score = None
            e.analyzed_at = None
    if payload.mood is not None:
        e.mood = payload.mood.strip() or None
    e.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(e)
    return journal_out(e)

@router.delete("/{entry_id}")
def delete_entry(entry_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    e = _own_entry(db, user, entry_id)
    db.delete(e)
    db.commit()
    return {"ok": True}

@router.post("/{entry_id}/analyze", response_model=JournalAnalysisOut)
async def analyze(
    entry_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    sentiment: SentimentClient = Depends(get_sentiment),
):
    e = _own_entry(db, user, entry_id)
    await analyze_entry(db, sentiment, e, user)
    db.refresh(e)
    db.refresh(user)
    return JournalAnalysisOut(entry=journal_out(e), risk=risk_out(user))
