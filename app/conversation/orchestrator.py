from __future__ import annotations
from typing import Any, Dict, Sequence, Tuple

from .acts import classify_act, crisis_reply, ACT_CRISIS
from ..llm.composer import compose
from ..llm.gemini_client import GeminiClient

DISCLAIMER = "Milo provides support but not medical advice. In crisis, contact {hotline} or your local emergency services."

async def handle_turn(
    llm: GeminiClient,
    history: Sequence[Tuple[str, str]],
    user_text: str,
    hotline: str,
) -> Tuple[str, str, Dict[str, Any]]:
    """Produce the companion's reply, its mood tag and debug meta.

    Crisis messages never reach the model: the safety reply is fixed.
    """
    act_res = classify_act(user_text)
    if act_res.act == ACT_CRISIS:
        reply = crisis_reply(hotline)
    else:
        reply = await compose(llm, history, user_text)

    meta = {
        "act": act_res.act,
        "crisis": act_res.act == ACT_CRISIS,
        "disclaimer": DISCLAIMER.format(hotline=hotline),
    }
    return reply, act_res.mood, meta
