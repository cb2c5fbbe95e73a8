from typing import Sequence, Tuple

from .gemini_client import GeminiClient, user_content, model_content
from .prompts import SYSTEM, COMPANION_INSTRUCTIONS

async def compose(llm: GeminiClient, history: Sequence[Tuple[str, str]], user_text: str) -> str:
    """Companion reply for ``user_text`` given earlier (role, text) pairs, oldest first."""
    contents = []
    for role, text in history:
        contents.append(model_content(text) if role == "assistant" else user_content(text))
    contents.append(user_content(user_text))
    text = await llm.generate(SYSTEM + "\n" + COMPANION_INSTRUCTIONS, contents, temperature=0.6)
    return text.strip()
