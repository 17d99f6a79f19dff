"""FastAPI application factory wiring routes, services, and shared state."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api import routes_health, routes_users
from app.core.config import Settings, get_settings
from app.core.db import Base, build_engine, build_session_factory
from app.core.errors import setup_exception_handlers
from app.models import sequence, user  # noqa: F401 - ensure models are registered
from app.repositories.sequence_repository import SequenceRepository
from app.repositories.user_repository import UserRepository
from app.services.code_issuer import CodeIssuer
from app.services.email_service import EmailService
from app.services.image_storage import UPLOADS_PATH, ImageStorage
from app.services.profile_service import ProfileService

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Store connectivity failures here abort start-up.
    app.state.image_storage.ensure_directory()
    Base.metadata.create_all(bind=app.state.engine)
    with app.state.session_factory() as db:
        app.state.code_issuer.ensure_seeded(db)
    LOGGER.info("🗄️ Database ready, uploads in %s", app.state.image_storage.upload_dir)
    if not app.state.email_service.is_configured:
        LOGGER.warning("⚠️ RESEND_API_KEY not set - access codes are logged to the console")
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = FastAPI(title="UserApp access codes", version="0.1.0", lifespan=lifespan)

    # Initialize persistence and services
    engine = build_engine(settings)
    user_repo = UserRepository()
    code_issuer = CodeIssuer(SequenceRepository(), user_repo)
    email_service = EmailService(settings)
    image_storage = ImageStorage(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL, settings.MAX_UPLOAD_BYTES)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.code_issuer = code_issuer
    app.state.email_service = email_service
    app.state.image_storage = image_storage
    app.state.profile_service = ProfileService(
        user_repo,
        code_issuer,
        email_service,
        image_storage,
        code_issue_attempts=settings.CODE_ISSUE_ATTEMPTS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    app.include_router(routes_users.router)
    app.include_router(routes_health.router)
    app.mount(UPLOADS_PATH, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logging.info("📥 %s %s START", request.method, request.url.path)
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logging.info("🚀 %s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response

    return app


app = create_app()
