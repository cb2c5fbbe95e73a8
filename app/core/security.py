import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from jose import jwt
from passlib.context import CryptContext
from .config import settings

ALGORITHM = "HS256"
TOKEN_ACCESS = "access"
TOKEN_REFRESH = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()

def _encode(user_id: str, typ: str, expires: datetime) -> tuple[str, str]:
    jti = secrets.token_urlsafe(32)
    payload = {
        "sub": user_id,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": int(datetime.now(timezone.utc).timestamp()),
        "exp": int(expires.timestamp()),
        "typ": typ,
        "jti": jti,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM), jti

def create_access_token(user_id: str) -> tuple[str, int]:
    ttl = int(settings.JWT_ACCESS_TTL_SECONDS)
    token, _ = _encode(user_id, TOKEN_ACCESS, datetime.now(timezone.utc) + timedelta(seconds=ttl))
    return token, ttl

def create_refresh_token(user_id: str) -> tuple[str, datetime, str]:
    """Returns the token, its naive-UTC expiry (as stored) and its jti."""
    exp = datetime.now(timezone.utc) + timedelta(days=int(settings.JWT_REFRESH_TTL_DAYS))
    token, jti = _encode(user_id, TOKEN_REFRESH, exp)
    return token, exp.replace(tzinfo=None), jti

def decode_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )
