import logging
from typing import Sequence

from ..errors import UpstreamError
from ..wellness.plan import WellnessScores
from .gemini_client import GeminiClient, user_content
from .prompts import SYSTEM, WELLNESS_INSTRUCTIONS

logger = logging.getLogger(__name__)

SCORE_KEYS = ("moodScore", "anxietyScore", "stressScore", "socialEngagementScore")

def _strings(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]

async def extract_wellness(
    llm: GeminiClient,
    journal_texts: Sequence[str],
    chat_texts: Sequence[str],
) -> tuple[WellnessScores, list[str], list[str]]:
    """Ask the model for sub-scores, recommendations and today's activities.

    Missing or non-numeric scores make the whole reply unusable.
    """
    journal = "\n".join(f"- {t}" for t in journal_texts) or "(none)"
    chat = "\n".join(f"- {t}" for t in chat_texts) or "(none)"
    prompt = f"Recent journal entries:\n{journal}\n\nRecent chat messages from the user:\n{chat}"
    data = await llm.generate_json(SYSTEM + "\n" + WELLNESS_INSTRUCTIONS, [user_content(prompt)])
    try:
        scores = WellnessScores.from_raw(*(data[k] for k in SCORE_KEYS))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Wellness analysis reply missing scores: %s", data)
        raise UpstreamError("AI returned incomplete wellness scores.") from e
    return scores, _strings(data.get("recommendations")), _strings(data.get("dailyActivities"))
