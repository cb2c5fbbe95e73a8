"""Per-day task storage.

The list itself is decided by ``wellness.tasks.build_daily_tasks``; this
module loads what is stored for the day, writes the resulting list back and
flips single tasks.
"""

from __future__ import annotations

import json
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models import DailyTask, User, WellnessPlan
from ..utils.dates import today_str
from ..wellness.tasks import TaskItem, build_daily_tasks, toggle


def latest_plan(db: Session, user_id: str) -> Optional[WellnessPlan]:
    return (
        db.query(WellnessPlan)
        .filter(WellnessPlan.user_id == user_id)
        .order_by(WellnessPlan.created_at.desc())
        .first()
    )


def _stored_rows(db: Session, user_id: str, day: str) -> List[DailyTask]:
    return (
        db.query(DailyTask)
        .filter(DailyTask.user_id == user_id, DailyTask.date == day)
        .order_by(DailyTask.position.asc())
        .all()
    )


def _to_item(row: DailyTask) -> TaskItem:
    return TaskItem(id=row.task_id, title=row.title, completed=row.completed, completed_at=row.completed_at)


def _save(db: Session, user_id: str, day: str, tasks: List[TaskItem], rows: List[DailyTask]) -> None:
    by_id = {r.task_id: r for r in rows}
    keep = {t.id for t in tasks}
    for pos, t in enumerate(tasks):
        row = by_id.get(t.id)
        if row is None:
            row = DailyTask(user_id=user_id, date=day, task_id=t.id)
            db.add(row)
        row.title = t.title
        row.position = pos
        row.completed = t.completed
        row.completed_at = t.completed_at
    # a tier change can replace the generated tasks mid-day
    for r in rows:
        if r.task_id not in keep:
            db.delete(r)


def today_tasks(db: Session, user: User, day: str | None = None) -> Tuple[str, List[TaskItem]]:
    day = day or today_str()
    rows = _stored_rows(db, user.id, day)
    plan = latest_plan(db, user.id)
    activities = json.loads(plan.activities_json) if plan else None
    tasks = build_daily_tasks(user.risk_level, activities, [_to_item(r) for r in rows])
    _save(db, user.id, day, tasks, rows)
    db.commit()
    return day, tasks


def toggle_task(db: Session, user: User, task_id: str, day: str | None = None) -> Tuple[str, List[TaskItem]]:
    day, tasks = today_tasks(db, user, day)
    for i, t in enumerate(tasks):
        if t.id == task_id:
            tasks[i] = toggle(t)
            break
    else:
        raise NotFound("Task not found")
    _save(db, user.id, day, tasks, _stored_rows(db, user.id, day))
    db.commit()
    return day, tasks
