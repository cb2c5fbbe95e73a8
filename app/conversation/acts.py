from dataclasses import dataclass
import re

ACT_CRISIS="CRISIS"
ACT_LOW_MOOD="LOW_MOOD"
ACT_ANXIETY="ANXIETY"
ACT_POSITIVE="POSITIVE"
ACT_FATIGUE="FATIGUE"
ACT_LONELY="LONELY"
ACT_HELP="HELP_SEEKING"
ACT_OTHER="OTHER"

MOOD_SUPPORTIVE="supportive"
MOOD_CONCERNED="concerned"
MOOD_ENCOURAGING="encouraging"

CRISIS_PATTERNS = [
    r"\b(suicid(e|al)|kill myself|end my life|end it all|self[- ]?harm|hurt myself)\b",
]

# first match wins, so order matters
ACT_PATTERNS = [
    (ACT_LOW_MOOD, r"\b(sad|depressed|down|hopeless)\b", MOOD_CONCERNED),
    (ACT_ANXIETY, r"\b(anxious|anxiety|worried|stress(ed)?|panic)\b", MOOD_SUPPORTIVE),
    (ACT_POSITIVE, r"\b(good|great|happy|better)\b", MOOD_ENCOURAGING),
    (ACT_FATIGUE, r"\b(tired|exhausted|drained)\b", MOOD_SUPPORTIVE),
    (ACT_LONELY, r"\b(alone|lonely)\b", MOOD_CONCERNED),
    (ACT_HELP, r"\b(help|support)\b", MOOD_SUPPORTIVE),
]

@dataclass
class ActResult:
    act: str
    mood: str
    signals: dict

def classify_act(user_text: str) -> ActResult:
    t=user_text.strip().lower()

    for pat in CRISIS_PATTERNS:
        if re.search(pat,t):
            return ActResult(ACT_CRISIS, MOOD_CONCERNED, {"matched": pat})

    for act, pat, mood in ACT_PATTERNS:
        if re.search(pat,t):
            return ActResult(act, mood, {"matched": pat})

    return ActResult(ACT_OTHER, MOOD_SUPPORTIVE, {})

def crisis_reply(hotline: str) -> str:
    return (
        "I'm very concerned about you right now. Please know that you matter and there are people who want to help. "
        f"I strongly encourage you to reach out to a crisis hotline: {hotline} (Suicide & Crisis Lifeline), "
        "or your local emergency services. You can also contact your trusted person right now. "
        "Would you like help finding immediate professional support?"
    )
