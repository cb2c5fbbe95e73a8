from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.db import get_db
from ..deps import get_current_user, get_llm
from ...llm.gemini_client import GeminiClient
from ...models import User, ChatMessage
from ..schemas import ChatMessageIn, ChatMessageOut, ChatReplyOut
from ..views import chat_out
from ...conversation.orchestrator import handle_turn

router = APIRouter(prefix="/chat", tags=["chat"])

def _recent(db: Session, user: User, limit: int) -> list[ChatMessage]:
    rows = (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == user.id)
        .order_by(ChatMessage.created_at.desc())
        .limit(limit)
        .all()
    )
    return list(reversed(rows))

@router.post("/message", response_model=ChatReplyOut)
async def message(
    payload: ChatMessageIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    llm: GeminiClient = Depends(get_llm),
):
    text = payload.message.strip()
    if not text:
        raise HTTPException(status_code=422, detail="message required")

    history = [(m.role, m.text) for m in _recent(db, user, settings.CHAT_CONTEXT_MESSAGES)]
    # an upstream failure propagates from here with nothing persisted
    reply_text, mood, meta = await handle_turn(llm, history, text, settings.CRISIS_HOTLINE)

    now = datetime.utcnow()
    um = ChatMessage(user_id=user.id, role="user", text=text, created_at=now)
    # keep the pair ordered even when both land in the same clock tick
    am = ChatMessage(user_id=user.id, role="assistant", text=reply_text, mood=mood, created_at=now + timedelta(microseconds=1))
    db.add_all([um, am])
    db.commit()
    db.refresh(um)
    db.refresh(am)

    return ChatReplyOut(userMessage=chat_out(um), assistantMessage=chat_out(am), meta=meta)

@router.get("/messages", response_model=list[ChatMessageOut])
def list_messages(limit: int = Query(50, ge=1, le=200), db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [chat_out(m) for m in _recent(db, user, limit)]

@router.delete("/messages")
def delete_messages(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db.query(ChatMessage).filter(ChatMessage.user_id == user.id).delete()
    db.commit()
    return {"ok": True}
