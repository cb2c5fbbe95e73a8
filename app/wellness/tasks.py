from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence

from ..core.config import settings
from .catalog import load_catalog
from .risk import is_valid_risk

@dataclass
class TaskItem:
    id: str
    title: str
    completed: bool = False
    completed_at: Optional[datetime] = None

@dataclass
class CompletionStats:
    completed: int
    total: int
    percentage: int

def tasks_for_risk(level: int) -> List[str]:
    if not is_valid_risk(level):
        return []
    titles = load_catalog()["tiers"][level]["tasks"]
    return [t.format(hotline=settings.CRISIS_HOTLINE) for t in titles]

def mandatory_tasks() -> List[TaskItem]:
    return [TaskItem(t["id"], t["title"]) for t in load_catalog()["mandatory_tasks"]]

def _from_risk(level: int) -> List[TaskItem]:
    return [TaskItem(f"risk_{level}_{i}", title) for i, title in enumerate(tasks_for_risk(level))]

def _from_plan(activities: Sequence[str]) -> List[TaskItem]:
    return [TaskItem(f"wellness_{i}", title) for i, title in enumerate(activities)]

def build_daily_tasks(
    risk_level: int | None,
    plan_activities: Sequence[str] | None,
    persisted: Sequence[TaskItem],
) -> List[TaskItem]:
    """Assemble the day's task list.

    Source order: an assessed risk tier, then the latest wellness plan's
    activities, then whatever is already stored for the day. Completion
    state already stored for a task id is kept, and the mandatory tasks are
    appended when the chosen source did not produce them.
    """
    if is_valid_risk(risk_level):
        tasks = _from_risk(risk_level)
    elif plan_activities:
        tasks = _from_plan(plan_activities)
    else:
        tasks = [replace(t) for t in persisted]

    stored = {t.id: t for t in persisted}
    merged = []
    for t in tasks:
        prev = stored.get(t.id)
        if prev is not None:
            t = replace(t, completed=prev.completed, completed_at=prev.completed_at)
        merged.append(t)

    have = {t.id for t in merged}
    for m in mandatory_tasks():
        if m.id in have:
            continue
        prev = stored.get(m.id)
        if prev is not None:
            m = replace(m, completed=prev.completed, completed_at=prev.completed_at)
        merged.append(m)
    return merged

def toggle(task: TaskItem, now: datetime | None = None) -> TaskItem:
    completed = not task.completed
    return replace(
        task,
        completed=completed,
        completed_at=(now or datetime.utcnow()) if completed else None,
    )

def completion_stats(tasks: Sequence[TaskItem]) -> CompletionStats:
    total = len(tasks)
    done = sum(1 for t in tasks if t.completed)
    # halves round up
    pct = int(done * 100 / total + 0.5) if total else 0
    return CompletionStats(completed=done, total=total, percentage=pct)
