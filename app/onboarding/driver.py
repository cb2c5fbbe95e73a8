"""Onboarding dialogue.

The session is an append-only list of turns, each spoken by ``user`` or
``ai``. Every submission sends the whole transcript to the model, which
answers with the next question. The session ends when the model flags its
reply as the final confirmation, or when the reply carries the completion
phrase (older prompts and some model replies only do the latter).

This module holds no persistence; ``advance`` returns the user/ai pair to
append and the route stores it in one commit. The greeting that opens every
transcript is constant and is not stored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..errors import Conflict, UpstreamError
from ..llm.gemini_client import GeminiClient, user_content
from ..llm.prompts import SYSTEM, ONBOARDING_INSTRUCTIONS, COMPLETION_PHRASE

logger = logging.getLogger(__name__)

SPEAKER_USER = "user"
SPEAKER_AI = "ai"

GREETING = "Hi, I'm Milo, your wellness companion. I'm so glad you're here! To get started, what should I call you?"

@dataclass
class Turn:
    speaker: str
    text: str

@dataclass
class OnboardingSession:
    turns: List[Turn] = field(default_factory=list)
    is_complete: bool = False

@dataclass
class TurnOutcome:
    question: str
    is_complete: bool
    new_turns: List[Turn]
    # set only on the first user reply after the greeting
    captured_name: Optional[str] = None

def is_completion_reply(text: str) -> bool:
    return COMPLETION_PHRASE in text.lower()

def render_transcript(turns: Sequence[Turn]) -> str:
    return "\n".join(f"{t.speaker}: {t.text}" for t in turns)

def build_prompt(turns: Sequence[Turn]) -> str:
    return (
        "Current conversation:\n"
        f"{render_transcript(turns)}\n\n"
        "Based on the conversation, what is the next single question you should ask? "
        f'If all questions have been answered, confirm and use the phrase "{COMPLETION_PHRASE}".'
    )

def full_transcript(session: OnboardingSession) -> List[Turn]:
    """Stored turns behind the fixed greeting, which is never persisted."""
    return [Turn(SPEAKER_AI, GREETING)] + list(session.turns)

async def advance(llm: GeminiClient, session: OnboardingSession, message: str) -> TurnOutcome:
    if session.is_complete:
        raise Conflict("Onboarding is already complete for this user.")
    text = message.strip()
    turns = full_transcript(session)
    # transcript is [greeting, user, ...]: the reply at index 1 is taken as the name
    first_reply = not any(t.speaker == SPEAKER_USER for t in session.turns)
    user_turn = Turn(SPEAKER_USER, text)

    data = await llm.generate_json(
        SYSTEM + "\n" + ONBOARDING_INSTRUCTIONS,
        [user_content(build_prompt(turns + [user_turn]))],
        temperature=0.4,
    )
    reply = data.get("reply")
    if not isinstance(reply, str) or not reply.strip():
        logger.warning("Onboarding reply without text: %s", data)
        raise UpstreamError("Failed to parse AI response.")
    reply = reply.strip()
    complete = data.get("complete") is True or is_completion_reply(reply)

    return TurnOutcome(
        question=reply,
        is_complete=complete,
        new_turns=[user_turn, Turn(SPEAKER_AI, reply)],
        captured_name=text if first_reply else None,
    )
