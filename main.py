import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, settings as default_settings
from core.database import Database
from core.errors import register_exception_handlers
from core.rate_limit import SlidingWindowRateLimiter, rate_limit_middleware
from routes.auth import router as auth_router
from routes.clients import router as clients_router
from routes.projects import router as projects_router
from routes.tasks import router as tasks_router
from routes.time_entries import router as time_entries_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    db = database or Database.from_settings(settings)

    # =========================================
    # 🏁 Lifespan (DB initialization)
    # =========================================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.create_all()
        app.state.started_at = time.monotonic()
        logger.info("✅ Freelance PM API started (%s)", settings.ENVIRONMENT)
        yield
        db.dispose()
        logger.info("✅ Application shutting down.")

    app = FastAPI(lifespan=lifespan, title="Freelance PM API")
    app.state.db = db
    app.state.started_at = time.monotonic()
    app.state.rate_limiter = SlidingWindowRateLimiter(
        settings.RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
    )

    app.middleware("http")(rate_limit_middleware(app.state.rate_limiter))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # =========================================
    # 📦 Routers
    # =========================================
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(clients_router, prefix="/api/clients")
    app.include_router(projects_router, prefix="/api/projects")
    app.include_router(tasks_router, prefix="/api/tasks")
    app.include_router(time_entries_router, prefix="/api/time-entries")

    # =========================================
    # 🩺 Health Check
    # =========================================
    @app.get("/api/health")
    def health_check():
        return {
            "success": True,
            "data": {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "uptime": round(time.monotonic() - app.state.started_at, 3),
            },
        }

    return app


app = create_app()
