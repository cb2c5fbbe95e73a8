"""Wellness plan aggregation.

Four sub-scores on a 0-10 scale feed an equally weighted overall score and a
referral flag. The referral flag is an OR over individual red flags: a
reassuring overall score never suppresses a referral raised by any single
dimension.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .catalog import load_catalog

SCORE_MIN = 0.0
SCORE_MAX = 10.0

REFERRAL_RISK_MIN = 4
LOW_MOOD = 3.0
HIGH_ANXIETY = 7.0
HIGH_STRESS = 7.0
LOW_OVERALL = 3.0
LOW_SOCIAL = 4.0

def clamp_score(value) -> float:
    v = float(value)
    if v != v:  # NaN
        raise ValueError("score is not a number")
    return max(SCORE_MIN, min(SCORE_MAX, v))

@dataclass
class WellnessScores:
    mood: float
    anxiety: float
    stress: float
    social_engagement: float

    @classmethod
    def from_raw(cls, mood, anxiety, stress, social_engagement) -> "WellnessScores":
        return cls(
            mood=clamp_score(mood),
            anxiety=clamp_score(anxiety),
            stress=clamp_score(stress),
            social_engagement=clamp_score(social_engagement),
        )

@dataclass
class Plan:
    scores: WellnessScores
    overall: float
    risk_level: int
    should_referral: bool
    recommendations: List[str] = field(default_factory=list)
    activities: List[str] = field(default_factory=list)

def overall_score(scores: WellnessScores) -> float:
    return (scores.mood + scores.anxiety + scores.stress + scores.social_engagement) / 4

def should_referral(*, risk_level: int, mood: float, anxiety: float, stress: float, overall: float) -> bool:
    return (
        risk_level >= REFERRAL_RISK_MIN
        or mood < LOW_MOOD
        or anxiety > HIGH_ANXIETY
        or stress > HIGH_STRESS
        or overall < LOW_OVERALL
    )

def recommended_activities(scores: WellnessScores) -> List[str]:
    acts = load_catalog()["activities"]
    out: List[str] = []
    if scores.mood < LOW_MOOD + 1:
        out.extend(acts["low_mood"])
    if scores.anxiety > HIGH_ANXIETY - 1:
        out.extend(acts["high_anxiety"])
    if scores.stress > HIGH_STRESS - 1:
        out.extend(acts["high_stress"])
    if scores.social_engagement < LOW_SOCIAL:
        out.extend(acts["low_social"])
    if not out:
        out.extend(acts["maintenance"])
    return out

def build_plan(
    scores: WellnessScores,
    risk_level: int,
    recommendations: Sequence[str] = (),
    activities: Sequence[str] = (),
) -> Plan:
    overall = overall_score(scores)
    referral = should_referral(
        risk_level=risk_level,
        mood=scores.mood,
        anxiety=scores.anxiety,
        stress=scores.stress,
        overall=overall,
    )
    acts = [a.strip() for a in activities if a and a.strip()]
    return Plan(
        scores=scores,
        overall=overall,
        risk_level=risk_level,
        should_referral=referral,
        recommendations=[r.strip() for r in recommendations if r and r.strip()],
        activities=acts or recommended_activities(scores),
    )
