import math
from datetime import datetime

import pytest

from app.wellness.catalog import load_catalog
from app.wellness.plan import WellnessScores, build_plan, clamp_score, overall_score, recommended_activities, should_referral
from app.wellness.risk import describe_risk, effective_risk_level, risk_from_questionnaire, risk_from_sentiment
from app.wellness.tasks import TaskItem, build_daily_tasks, completion_stats, tasks_for_risk, toggle

MANDATORY = ["mandatory_meditation", "mandatory_journal"]

@pytest.mark.parametrize("score,tier", [
    (-1.0, 5), (-0.8, 5), (-0.7, 4), (-0.5, 4), (-0.4, 3), (-0.2, 3),
    (-0.1, 2), (0.0, 2), (0.1, 1), (0.5, 1), (1.0, 1),
])
def test_sentiment_tiers(score, tier):
    assert risk_from_sentiment(score) == tier

def test_more_negative_sentiment_never_lowers_risk():
    scores = [i / 100 for i in range(-100, 101)]
    tiers = [risk_from_sentiment(s) for s in scores]
    assert all(a >= b for a, b in zip(tiers, tiers[1:]))

@pytest.mark.parametrize("phq9,gad7,safety,tier", [
    (25, 0, False, 4),
    (0, 15, False, 4),
    (15, 0, False, 3),
    (0, 10, False, 3),
    (5, 0, False, 2),
    (4, 4, False, 1),
    (0, 0, False, 1),
    (0, 0, True, 5),
    (27, 21, True, 5),
])
def test_questionnaire_tiers(phq9, gad7, safety, tier):
    assert risk_from_questionnaire(phq9, gad7, safety) == tier

def test_describe_risk_flags_support_from_tier_four():
    assert describe_risk(4).needs_support
    assert describe_risk(5).needs_support
    assert not describe_risk(3).needs_support
    assert describe_risk(1).label == "Wellbeing"
    with pytest.raises(ValueError):
        describe_risk(0)

def test_unassessed_user_gets_default_level():
    assert effective_risk_level(None) == 2
    assert effective_risk_level(True) == 2
    assert effective_risk_level(9) == 2
    assert effective_risk_level(4) == 4

def test_every_tier_has_two_tasks():
    for level in range(1, 6):
        assert len(tasks_for_risk(level)) == 2
    assert "988" in tasks_for_risk(5)[0]
    assert "{hotline}" not in " ".join(tasks_for_risk(5))

@pytest.mark.parametrize("level", [0, 6, -1, None])
def test_out_of_range_tier_has_no_tasks(level):
    assert tasks_for_risk(level) == []

def test_daily_tasks_prefer_risk_tier():
    tasks = build_daily_tasks(3, ["Walk"], [])
    assert [t.id for t in tasks] == ["risk_3_0", "risk_3_1"] + MANDATORY
    assert tasks[0].title == tasks_for_risk(3)[0]

def test_daily_tasks_fall_back_to_plan_activities():
    tasks = build_daily_tasks(None, ["Walk", "Call a friend"], [])
    assert [t.id for t in tasks] == ["wellness_0", "wellness_1"] + MANDATORY
    assert tasks[1].title == "Call a friend"

def test_daily_tasks_fall_back_to_stored_list():
    stored = [TaskItem("custom", "Stretch", completed=True, completed_at=datetime(2024, 1, 1))]
    tasks = build_daily_tasks(None, None, stored)
    assert [t.id for t in tasks] == ["custom"] + MANDATORY
    assert tasks[0].completed

def test_daily_tasks_without_any_source_are_only_mandatory():
    assert [t.id for t in build_daily_tasks(None, [], [])] == MANDATORY

def test_daily_tasks_keep_completion_by_id():
    done = datetime(2024, 1, 1, 9, 0)
    stored = [
        TaskItem("risk_2_1", "old title", completed=True, completed_at=done),
        TaskItem("mandatory_journal", "Write in your journal", completed=True, completed_at=done),
    ]
    tasks = {t.id: t for t in build_daily_tasks(2, None, stored)}
    assert tasks["risk_2_1"].completed and tasks["risk_2_1"].completed_at == done
    # title comes from the current source
    assert tasks["risk_2_1"].title == tasks_for_risk(2)[1]
    assert tasks["mandatory_journal"].completed
    assert not tasks["risk_2_0"].completed

def test_mandatory_tasks_not_duplicated():
    stored = [TaskItem(i, "x") for i in MANDATORY]
    ids = [t.id for t in build_daily_tasks(None, None, stored)]
    assert ids == MANDATORY

def test_toggle_sets_and_clears_completion_time():
    now = datetime(2024, 5, 1, 12, 0)
    t = toggle(TaskItem("a", "A"), now)
    assert t.completed and t.completed_at == now
    t = toggle(t, now)
    assert not t.completed and t.completed_at is None

def test_completion_stats():
    assert completion_stats([]).percentage == 0
    stats = completion_stats([TaskItem("a", "A", True), TaskItem("b", "B"), TaskItem("c", "C")])
    assert (stats.completed, stats.total, stats.percentage) == (1, 3, 33)
    # one of eight is 12.5%, shown as 13
    eight = [TaskItem(str(i), "t", completed=(i == 0)) for i in range(8)]
    assert completion_stats(eight).percentage == 13
    assert completion_stats([TaskItem("a", "A", True), TaskItem("b", "B")]).percentage == 50

def test_overall_is_plain_mean():
    assert overall_score(WellnessScores(8, 2, 2, 8)) == 5.0
    assert overall_score(WellnessScores(10, 10, 10, 10)) == 10.0

HEALTHY = dict(risk_level=1, mood=8.0, anxiety=2.0, stress=2.0, overall=6.0)

def test_healthy_profile_needs_no_referral():
    assert not should_referral(**HEALTHY)

@pytest.mark.parametrize("change", [
    {"risk_level": 4},
    {"risk_level": 5},
    {"mood": 2.9},
    {"anxiety": 7.1},
    {"stress": 7.1},
    {"overall": 2.9},
])
def test_any_single_red_flag_triggers_referral(change):
    assert should_referral(**{**HEALTHY, **change})

@pytest.mark.parametrize("change", [
    {"risk_level": 3},
    {"mood": 3.0},
    {"anxiety": 7.0},
    {"stress": 7.0},
    {"overall": 3.0},
])
def test_referral_thresholds_are_strict(change):
    assert not should_referral(**{**HEALTHY, **change})

def test_high_overall_does_not_mask_low_mood():
    assert should_referral(risk_level=1, mood=1.0, anxiety=0.0, stress=0.0, overall=9.0)

def test_scores_are_clamped():
    s = WellnessScores.from_raw(12, -3, "5", 5.5)
    assert (s.mood, s.anxiety, s.stress, s.social_engagement) == (10.0, 0.0, 5.0, 5.5)
    with pytest.raises(ValueError):
        clamp_score(math.nan)
    with pytest.raises(ValueError):
        clamp_score("high")

def test_rule_based_activities():
    acts = load_catalog()["activities"]
    assert recommended_activities(WellnessScores(8, 2, 2, 8)) == acts["maintenance"]
    low = recommended_activities(WellnessScores(2, 8, 2, 2))
    assert low == acts["low_mood"] + acts["high_anxiety"] + acts["low_social"]

def test_build_plan_prefers_model_activities():
    scores = WellnessScores(2, 8, 8, 2)
    plan = build_plan(scores, 2, ["  Talk to someone ", ""], [" Walk ", "  "])
    assert plan.activities == ["Walk"]
    assert plan.recommendations == ["Talk to someone"]
    assert plan.should_referral
    assert plan.overall == 5.0

def test_build_plan_falls_back_to_rules():
    plan = build_plan(WellnessScores(8, 2, 2, 8), 1)
    assert plan.activities == load_catalog()["activities"]["maintenance"]
    assert not plan.should_referral
