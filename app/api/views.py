"""ORM/domain object -> response model conversions shared by several routers."""
import json
from typing import List

from ..models import ChatMessage, JournalEntry, User, WellnessPlan
from ..utils.dates import iso
from ..wellness.risk import describe_risk, effective_risk_level, is_valid_risk
from ..wellness.tasks import TaskItem, completion_stats
from .schemas import (
    ChatMessageOut, JournalOut, ProfileOut, RiskOut, TaskOut, TasksOut,
    WellnessPlanOut, WellnessScoresOut,
)

def risk_out(user: User) -> RiskOut:
    tier = describe_risk(effective_risk_level(user.risk_level))
    return RiskOut(
        level=tier.level,
        label=tier.label,
        description=tier.description,
        needsSupport=tier.needs_support,
        assessed=is_valid_risk(user.risk_level),
    )

def profile_out(user: User) -> ProfileOut:
    return ProfileOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        workingHours=user.working_hours,
        freeTimeFrom=user.free_time_from,
        freeTimeTo=user.free_time_to,
        trustedContactName=user.trusted_contact_name,
        trustedContactPhone=user.trusted_contact_phone,
        riskLevel=effective_risk_level(user.risk_level),
        onboardingComplete=user.onboarding_complete,
    )

def journal_out(e: JournalEntry) -> JournalOut:
    return JournalOut(
        id=e.id,
        entry=e.entry,
        mood=e.mood,
        sentimentScore=e.sentiment_score,
        analyzedAt=iso(e.analyzed_at),
        createdAt=iso(e.created_at),
    )

def chat_out(m: ChatMessage) -> ChatMessageOut:
    return ChatMessageOut(id=m.id, role=m.role, text=m.text, mood=m.mood, createdAt=iso(m.created_at))

def tasks_out(day: str, tasks: List[TaskItem]) -> TasksOut:
    stats = completion_stats(tasks)
    return TasksOut(
        date=day,
        tasks=[TaskOut(id=t.id, title=t.title, completed=t.completed, completedAt=iso(t.completed_at)) for t in tasks],
        completedCount=stats.completed,
        totalCount=stats.total,
        completionPercentage=stats.percentage,
    )

def plan_out(p: WellnessPlan) -> WellnessPlanOut:
    return WellnessPlanOut(
        id=p.id,
        scores=WellnessScoresOut(
            moodScore=p.mood_score,
            anxietyScore=p.anxiety_score,
            stressScore=p.stress_score,
            socialEngagementScore=p.social_engagement_score,
            overallWellnessScore=round(p.overall_score, 1),
        ),
        riskLevel=p.risk_level,
        shouldReferral=p.should_referral,
        recommendations=json.loads(p.recommendations_json or "[]"),
        dailyActivities=json.loads(p.activities_json or "[]"),
        createdAt=iso(p.created_at),
    )
