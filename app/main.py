import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.db import engine, Base
from .errors import AppError
from .llm.gemini_client import GeminiClient
from .services.sentiment import SentimentClient
from .api.routes.auth import router as auth_router
from .api.routes.users import router as users_router
from .api.routes.onboarding import router as onboarding_router
from .api.routes.risk import router as risk_router
from .api.routes.journal import router as journal_router
from .api.routes.chat import router as chat_router
from .api.routes.tasks import router as tasks_router
from .api.routes.wellness import router as wellness_router
from .api.routes.dashboard import router as dashboard_router
from .api.routes.misc import router as misc_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Milo Wellness API", version=settings.API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service handles owned by the app; routes reach them through api.deps
    app.state.llm = GeminiClient(settings)
    app.state.sentiment = SentimentClient(settings)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.on_event("startup")
    def on_startup():
        Base.metadata.create_all(bind=engine)

    app.include_router(misc_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(onboarding_router)
    app.include_router(risk_router)
    app.include_router(journal_router)
    app.include_router(chat_router)
    app.include_router(tasks_router)
    app.include_router(wellness_router)
    app.include_router(dashboard_router)
    return app


app = create_app()
