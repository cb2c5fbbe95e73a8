import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ...core.db import get_db
from ..deps import get_current_user
from ...models import User
from ..schemas import QuestionnaireIn, RiskOut
from ..views import risk_out
from ...wellness.risk import risk_from_questionnaire

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risk", tags=["risk"])

@router.get("", response_model=RiskOut)
def current_risk(user: User = Depends(get_current_user)):
    return risk_out(user)

@router.post("/questionnaire", response_model=RiskOut)
def reassess(payload: QuestionnaireIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    level = risk_from_questionnaire(payload.phq9Score, payload.gad7Score, payload.safetyRisk)
    if level != user.risk_level:
        logger.info("Risk level for user %s: %s -> %s (questionnaire)", user.id, user.risk_level, level)
    user.risk_level = level
    db.commit()
    db.refresh(user)
    return risk_out(user)
