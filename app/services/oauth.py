"""Third-party identity verification.

The web client signs in with Firebase Auth (email link, Google, ...) or
directly with Google, then posts the resulting ID token here. We verify it
and issue our own JWT pair so every other route sees one kind of token and
per-user ownership checks stay uniform.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from google.auth.transport import requests as grequests
from google.oauth2 import id_token

from ..core.config import settings


@dataclass
class ExternalIdentity:
    provider: str  # "google" | "firebase"
    subject: str
    email: str
    name: Optional[str] = None


def verify_google_id_token(token: str) -> ExternalIdentity:
    if not settings.GOOGLE_CLIENT_ID:
        raise RuntimeError("GOOGLE_CLIENT_ID is not configured")

    payload = id_token.verify_oauth2_token(token, grequests.Request(), audience=settings.GOOGLE_CLIENT_ID)
    sub = payload.get("sub")
    email = payload.get("email")
    if not sub or not email:
        raise ValueError("Invalid Google token payload")
    return ExternalIdentity(provider="google", subject=sub, email=email.lower(), name=payload.get("name"))


def _firebase_app():
    import firebase_admin
    from firebase_admin import credentials

    if not firebase_admin._apps:
        cred = credentials.Certificate(json.loads(settings.FIREBASE_SERVICE_ACCOUNT_JSON))
        firebase_admin.initialize_app(cred, {"projectId": settings.FIREBASE_PROJECT_ID})
    return firebase_admin.get_app()


def verify_firebase_id_token(token: str) -> ExternalIdentity:
    """Verify a Firebase ID token; needs FIREBASE_PROJECT_ID and FIREBASE_SERVICE_ACCOUNT_JSON."""
    if not settings.FIREBASE_PROJECT_ID or not settings.FIREBASE_SERVICE_ACCOUNT_JSON:
        raise RuntimeError("Firebase verification is not configured")

    from firebase_admin import auth

    decoded = auth.verify_id_token(token, app=_firebase_app())
    sub = decoded.get("uid")
    email = (decoded.get("email") or "").lower()
    if not sub or not email:
        raise ValueError("Invalid Firebase token payload")
    return ExternalIdentity(provider="firebase", subject=sub, email=email, name=decoded.get("name"))
