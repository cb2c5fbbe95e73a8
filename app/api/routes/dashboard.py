from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ...core.db import get_db
from ..deps import get_current_user
from ...models import User
from ..schemas import DashboardOut
from ..views import plan_out, risk_out, tasks_out
from ...services.daily_tasks import latest_plan, today_tasks
from ...utils.dates import greeting_for_hour

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    risk = risk_out(user)
    day, tasks = today_tasks(db, user)
    plan = latest_plan(db, user.id)
    # the tier may have risen since the plan was computed
    show_referral = risk.needsSupport or bool(plan and plan.should_referral)
    return DashboardOut(
        greeting=greeting_for_hour(datetime.now().hour),
        name=user.name,
        risk=risk,
        tasks=tasks_out(day, tasks),
        wellness=plan_out(plan) if plan else None,
        showReferral=show_referral,
    )
