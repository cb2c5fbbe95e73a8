from fastapi import APIRouter
from ...core.config import settings

router = APIRouter(tags=["misc"])

@router.get("/health")
def health():
    return {"ok": True}

@router.get("/version")
def version():
    return {"version": settings.API_VERSION}

@router.get("/config/app")
def app_config():
    return {
        "chatEnabled": bool(settings.GEMINI_API_KEY),
        "journalAnalysisEnabled": bool(settings.LANGUAGE_API_KEY),
        "crisisHotline": settings.CRISIS_HOTLINE,
    }
