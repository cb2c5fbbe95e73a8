import logging
from fastapi import APIRouter, Depends, HTTPException
from jose import JWTError
from sqlalchemy.orm import Session
from datetime import datetime
from ...core.db import get_db
from ...core.security import (
    hash_password, verify_password,
    create_access_token, create_refresh_token, decode_token, sha256_hex, TOKEN_REFRESH,
)
from ...models import User, RefreshToken
from ..schemas import (
    SignupRequest, LoginRequest, AuthResponse, TokenBundle, UserOut,
    RefreshRequest, LogoutRequest, GoogleOAuthRequest, FirebaseOAuthRequest,
)
from ...services.oauth import ExternalIdentity, verify_google_id_token, verify_firebase_id_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_out(user: User) -> UserOut:
    return UserOut(id=user.id, name=user.name, email=user.email, onboardingComplete=user.onboarding_complete)


def _issue_tokens(db: Session, user: User) -> AuthResponse:
    access, ttl = create_access_token(user.id)
    refresh, exp, jti = create_refresh_token(user.id)
    db.add(RefreshToken(user_id=user.id, token_jti=sha256_hex(jti), expires_at=exp))
    db.commit()
    return AuthResponse(
        token=TokenBundle(accessToken=access, refreshToken=refresh, expiresIn=ttl),
        user=_user_out(user),
    )


def _active(user: User | None) -> User:
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if user.is_disabled:
        raise HTTPException(status_code=403, detail="Account disabled")
    return user


@router.post("/signup", response_model=AuthResponse)
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    email = req.email.lower().strip()
    if not email or "@" not in email:
        raise HTTPException(status_code=422, detail="Invalid email")
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already exists")
    # display name normally arrives with the first onboarding reply
    user = User(email=email, password_hash=hash_password(req.password), name=(req.name or "").strip())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("New account %s", user.id)
    return _issue_tokens(db, user)


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == req.email.lower().strip()).first()
    if not user:
        raise HTTPException(status_code=404, detail="Account not found")
    if user.is_disabled:
        raise HTTPException(status_code=403, detail="Account disabled")
    if not user.password_hash:
        raise HTTPException(status_code=401, detail="Password login not available for this account")
    if not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _issue_tokens(db, user)


def _upsert_external_user(db: Session, ident: ExternalIdentity) -> User:
    user = db.query(User).filter(User.email == ident.email).first()
    if user is None:
        user = User(email=ident.email, password_hash=None, name=ident.name or "")
        db.add(user)
    user.auth_provider = ident.provider
    user.provider_subject = ident.subject
    if ident.name and not user.name:
        user.name = ident.name
    db.commit()
    db.refresh(user)
    return user


@router.post("/oauth/google", response_model=AuthResponse)
def oauth_google(req: GoogleOAuthRequest, db: Session = Depends(get_db)):
    """Exchange a Google ID token for our JWT pair."""
    try:
        ident = verify_google_id_token(req.idToken)
    except Exception as e:
        raise HTTPException(status_code=401, detail=f"Invalid Google token: {e}")
    return _issue_tokens(db, _active(_upsert_external_user(db, ident)))


@router.post("/oauth/firebase", response_model=AuthResponse)
def oauth_firebase(req: FirebaseOAuthRequest, db: Session = Depends(get_db)):
    """Exchange a Firebase ID token (what the web client signs in with) for our JWT pair."""
    try:
        ident = verify_firebase_id_token(req.idToken)
    except Exception as e:
        raise HTTPException(status_code=401, detail=f"Invalid Firebase token: {e}")
    return _issue_tokens(db, _active(_upsert_external_user(db, ident)))


def _refresh_row(db: Session, token: str) -> RefreshToken | None:
    try:
        payload = decode_token(token)
    except JWTError:
        return None
    if payload.get("typ") != TOKEN_REFRESH or not payload.get("jti"):
        return None
    return db.query(RefreshToken).filter(RefreshToken.token_jti == sha256_hex(payload["jti"])).first()


@router.post("/refresh", response_model=AuthResponse)
def refresh(req: RefreshRequest, db: Session = Depends(get_db)):
    row = _refresh_row(db, req.refreshToken)
    if not row or row.revoked:
        raise HTTPException(status_code=401, detail="Invalid or revoked refresh token")
    if row.expires_at < datetime.utcnow():
        raise HTTPException(status_code=401, detail="Refresh token expired")
    user = _active(db.query(User).filter(User.id == row.user_id).first())
    # rotate
    row.revoked = True
    return _issue_tokens(db, user)


@router.post("/logout")
def logout(req: LogoutRequest, db: Session = Depends(get_db)):
    # idempotent revoke
    row = _refresh_row(db, req.refreshToken)
    if row:
        row.revoked = True
        db.commit()
    return {"ok": True}
