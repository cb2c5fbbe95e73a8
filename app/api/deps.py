from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from ..core.db import get_db
from ..core.security import decode_token, TOKEN_ACCESS
from ..llm.gemini_client import GeminiClient
from ..models import User
from ..services.sentiment import SentimentClient

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=401, detail="Missing Authorization Bearer token")
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("typ") != TOKEN_ACCESS:
        raise HTTPException(status_code=401, detail="Invalid token type")
    user = db.query(User).filter(User.id == payload.get("sub")).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if user.is_disabled:
        raise HTTPException(status_code=403, detail="Account disabled")
    return user

# Service handles are built once in main.create_app and live on app.state.
def get_llm(request: Request) -> GeminiClient:
    return request.app.state.llm

def get_sentiment(request: Request) -> SentimentClient:
    return request.app.state.sentiment
