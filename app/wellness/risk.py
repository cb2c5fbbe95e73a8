"""Risk tiers.

Every risk level surfaced by the service is one of five discrete tiers,
1 (minimal) to 5 (crisis). Two sources produce a tier: a sentiment score
from journal analysis and the onboarding questionnaire.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..core.config import settings
from .catalog import load_catalog

MIN_RISK = 1
MAX_RISK = 5
RISK_LEVELS = tuple(range(MIN_RISK, MAX_RISK + 1))

# (exclusive upper bound, tier), checked top-down
SENTIMENT_BANDS = (
    (-0.7, 5),
    (-0.4, 4),
    (-0.1, 3),
    (0.1, 2),
)

# (depression-like, anxiety-like) minimums per tier, checked top-down
QUESTIONNAIRE_BANDS = (
    (20, 15, 4),  # severe
    (15, 10, 3),  # moderate
    (5, 5, 2),    # mild
)

@dataclass
class RiskTier:
    level: int
    label: str
    description: str
    needs_support: bool

def risk_from_sentiment(score: float) -> int:
    for upper, tier in SENTIMENT_BANDS:
        if score < upper:
            return tier
    return MIN_RISK

def risk_from_questionnaire(phq9: int, gad7: int, safety_risk: bool) -> int:
    # Self-harm risk dominates any numeric reading; never tune this away.
    if safety_risk:
        return MAX_RISK
    for phq9_min, gad7_min, tier in QUESTIONNAIRE_BANDS:
        if phq9 >= phq9_min or gad7 >= gad7_min:
            return tier
    return MIN_RISK

def is_valid_risk(level) -> bool:
    return isinstance(level, int) and not isinstance(level, bool) and MIN_RISK <= level <= MAX_RISK

def effective_risk_level(stored: int | None) -> int:
    if is_valid_risk(stored):
        return stored
    return settings.DEFAULT_RISK_LEVEL

def describe_risk(level: int) -> RiskTier:
    tier = load_catalog()["tiers"].get(level)
    if tier is None:
        raise ValueError(f"Unknown risk level: {level}")
    return RiskTier(
        level=level,
        label=tier["label"],
        description=tier["description"],
        needs_support=level >= 4,
    )
