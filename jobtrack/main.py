"""JobTrack API: app factory, lifespan and the JSON error surface."""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api_v1 import api_v1_router
from .auth.service import ensure_admin_user
from .config import settings, setup_logging
from .database.base import SessionLocal, get_db
from .dependencies import AuthRequired
from .integrations.anthropic_client import AIGenerationError, AIServiceNotConfigured
from .integrations.cache import create_cache_service
from .rate_limit import limiter

logger = logging.getLogger(__name__)

__version__ = "1.0.0"

_startup_time: float = 0.0


def _run_migrations() -> None:
    """Upgrade the database to the newest Alembic revision."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(Path(__file__).parent.parent / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.effective_database_url)
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Logging, migrations, cache and the bootstrap admin user."""
    global _startup_time
    _startup_time = time.time()

    setup_logging()

    if not settings.ai_configured:
        logger.warning("ANTHROPIC_API_KEY not set: AI generation endpoints will return 503")

    if settings.run_migrations:
        _run_migrations()

    app.state.cache = create_cache_service()

    db = SessionLocal()
    try:
        ensure_admin_user(db)
        db.commit()
    finally:
        db.close()

    yield


def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as ``{"error": ...}`` JSON."""

    @app.exception_handler(AuthRequired)
    async def auth_required(request: Request, exc: AuthRequired):
        return _error("Unauthorized", 401)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        # Bodies that are not JSON at all fail while FastAPI reads them, before the
        # session guard runs, so they are 400 even without a session. Schema errors
        # are checked after the guard and answer 401 first.
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return _error("Invalid request data", 400, details=details)

    @app.exception_handler(AIServiceNotConfigured)
    async def ai_not_configured(request: Request, exc: AIServiceNotConfigured):
        return _error(str(exc), 503)

    @app.exception_handler(AIGenerationError)
    async def ai_failed(request: Request, exc: AIGenerationError):
        logger.error("AI generation failed on %s %s: %s", request.method, request.url.path, exc)
        return _error(str(exc), 502)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limited(request: Request, exc: RateLimitExceeded):
        retry_after = 60
        return JSONResponse(
            {"error": "Too many requests", "detail": str(exc.detail), "retry_after": retry_after},
            status_code=429,
            headers={"Retry-After": str(retry_after)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error("Internal server error", 500)


def _add_middleware(app: FastAPI) -> None:
    # LIFO: the last one added runs outermost
    app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, max_age=settings.session_max_age)

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    if settings.trusted_hosts_list != ["*"]:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts_list)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


def create_app() -> FastAPI:
    """Build the app: error handlers, middleware, API routes and /health."""
    app = FastAPI(title="JobTrack", version=__version__, lifespan=lifespan)
    _register_exception_handlers(app)
    _add_middleware(app)
    app.include_router(api_v1_router)

    @app.get("/health")
    def health(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            db_status = "ok"
        except SQLAlchemyError:
            logger.warning("Health check could not reach the database", exc_info=True)
            db_status = "unreachable"

        return {
            "status": "ok" if db_status == "ok" else "degraded",
            "db": db_status,
            "version": __version__,
            "uptime_seconds": round(time.time() - _startup_time, 1) if _startup_time else 0.0,
        }

    return app


app = create_app()
