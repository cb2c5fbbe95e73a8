import json
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.db import get_db
from ...llm.extractor import extract_wellness
from ...llm.gemini_client import GeminiClient
from ...models import User, ChatMessage, JournalEntry, WellnessPlan
from ...services.daily_tasks import latest_plan
from ...wellness.plan import build_plan
from ...wellness.risk import effective_risk_level
from ..deps import get_current_user, get_llm
from ..schemas import WellnessPlanOut
from ..views import plan_out

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wellness", tags=["wellness"])

@router.post("/analyze", response_model=WellnessPlanOut)
async def analyze(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    llm: GeminiClient = Depends(get_llm),
):
    lookback = settings.WELLNESS_LOOKBACK_ITEMS
    journals = (
        db.query(JournalEntry)
        .filter(JournalEntry.user_id == user.id)
        .order_by(JournalEntry.created_at.desc())
        .limit(lookback)
        .all()
    )
    chats = (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == user.id, ChatMessage.role == "user")
        .order_by(ChatMessage.created_at.desc())
        .limit(lookback)
        .all()
    )
    journal_texts = [f"({e.mood}) {e.entry}" if e.mood else e.entry for e in reversed(journals)]
    scores, recommendations, activities = await extract_wellness(
        llm, journal_texts, [m.text for m in reversed(chats)]
    )

    plan = build_plan(scores, effective_risk_level(user.risk_level), recommendations, activities)
    row = WellnessPlan(
        user_id=user.id,
        mood_score=plan.scores.mood,
        anxiety_score=plan.scores.anxiety,
        stress_score=plan.scores.stress,
        social_engagement_score=plan.scores.social_engagement,
        overall_score=plan.overall,
        risk_level=plan.risk_level,
        should_referral=plan.should_referral,
        recommendations_json=json.dumps(plan.recommendations),
        activities_json=json.dumps(plan.activities),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    if plan.should_referral:
        logger.info("Wellness plan %s for user %s recommends referral", row.id, user.id)
    return plan_out(row)

@router.get("/plan", response_model=WellnessPlanOut)
def current_plan(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    row = latest_plan(db, user.id)
    if not row:
        raise HTTPException(status_code=404, detail="No wellness plan yet")
    return plan_out(row)
