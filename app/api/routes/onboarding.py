import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...core.db import get_db
from ...errors import Conflict
from ...llm.gemini_client import GeminiClient
from ...models import User, OnboardingTurn
from ...onboarding.driver import OnboardingSession, Turn, advance, full_transcript
from ...wellness.risk import risk_from_questionnaire
from ..deps import get_current_user, get_llm
from ..schemas import (
    AssessmentIn, OnboardingMessageIn, OnboardingMessageOut, OnboardingStateOut,
    OnboardingTurnOut, RiskOut,
)
from ..views import risk_out
from .users import apply_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

def _session(user: User) -> OnboardingSession:
    return OnboardingSession(
        turns=[Turn(t.speaker, t.text) for t in user.onboarding_turns],
        is_complete=user.onboarding_complete,
    )

def _history(session: OnboardingSession) -> list[OnboardingTurnOut]:
    return [OnboardingTurnOut(speaker=t.speaker, text=t.text) for t in full_transcript(session)]

@router.get("", response_model=OnboardingStateOut)
def state(user: User = Depends(get_current_user)):
    session = _session(user)
    return OnboardingStateOut(history=_history(session), isComplete=session.is_complete)

@router.post("/message", response_model=OnboardingMessageOut)
async def message(
    payload: OnboardingMessageIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    llm: GeminiClient = Depends(get_llm),
):
    text = payload.message.strip()
    if not text:
        raise HTTPException(status_code=422, detail="message required")

    session = _session(user)
    # raises before anything is written
    outcome = await advance(llm, session, text)

    position = len(session.turns)
    for i, turn in enumerate(outcome.new_turns):
        db.add(OnboardingTurn(user_id=user.id, position=position + i, speaker=turn.speaker, text=turn.text))
    if outcome.captured_name is not None:
        user.name = outcome.captured_name[:200]
    if outcome.is_complete:
        user.onboarding_complete = True
        logger.info("Onboarding complete for user %s", user.id)
    db.commit()
    db.refresh(user)

    return OnboardingMessageOut(
        question=outcome.question,
        isComplete=outcome.is_complete,
        history=_history(_session(user)),
    )

@router.post("/assessment", response_model=RiskOut)
def assessment(payload: AssessmentIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Form-based onboarding: profile details plus the short questionnaire."""
    if user.onboarding_complete:
        raise Conflict("Onboarding is already complete for this user.")
    apply_profile(user, payload.model_dump())
    user.risk_level = risk_from_questionnaire(payload.phq9Score, payload.gad7Score, payload.safetyRisk)
    user.onboarding_complete = True
    db.commit()
    db.refresh(user)
    logger.info("Onboarding assessment for user %s -> risk %s", user.id, user.risk_level)
    return risk_out(user)
