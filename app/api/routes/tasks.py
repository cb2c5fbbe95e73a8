from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ...core.db import get_db
from ..deps import get_current_user
from ...models import User
from ..schemas import TasksOut
from ..views import tasks_out
from ...services.daily_tasks import today_tasks, toggle_task

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("/today", response_model=TasksOut)
def today(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    day, tasks = today_tasks(db, user)
    return tasks_out(day, tasks)

@router.post("/today/{task_id}/toggle", response_model=TasksOut)
def toggle(task_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    day, tasks = toggle_task(db, user, task_id)
    return tasks_out(day, tasks)
