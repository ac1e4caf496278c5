"""TaskVault API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskVaultError → {success: false, message}
    - Session signing key and envelope key are loaded once from settings and held on
      app.state; nothing downstream reads them from the environment
    - Middleware order (outermost first): CORS → security headers → rate limit → routes
    - Weak or placeholder keys produce a startup WARNING, never a startup failure

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Security objects attached at import time, not in lifespan: ASGI test transports
      that skip lifespan still get a fully wired app
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from app.api.routes import auth, health, tasks
from app.api.session_cookie import CookiePolicy
from app.config import Settings, get_settings
from app.core.envelope_cipher import EnvelopeCipher
from app.core.secret_policy import find_weak_secrets
from app.core.session_tokens import SessionTokenService
import app.infrastructure.database as database
from app.infrastructure.observability import setup_logging
from app.infrastructure.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


def warn_on_weak_secrets(settings: Settings) -> list[str]:
    warnings = find_weak_secrets(settings.jwt_secret, settings.encryption_key)
    for message in warnings:
        logger.warning(f"[SECURITY WARNING] {message}")
    return warnings


def attach_security(app: FastAPI, settings: Settings) -> None:
    """Build the process-wide token service, cipher, and cookie policy."""
    lifetime = timedelta(days=settings.jwt_expire_days)
    app.state.session_tokens = SessionTokenService(settings.jwt_secret, lifetime)
    app.state.envelope_cipher = EnvelopeCipher(settings.encryption_key)
    app.state.cookie_policy = CookiePolicy(
        production=settings.is_production,
        max_age_seconds=int(lifetime.total_seconds()),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    warn_on_weak_secrets(settings)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"TaskVault API started in {settings.environment} mode")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("TaskVault API shutting down")


app = FastAPI(
    title="TaskVault API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
attach_security(app, settings)

# Added innermost first: Starlette wraps each new middleware around the previous ones
app.add_middleware(
    RateLimitMiddleware,
    limiter=FixedWindowRateLimiter(
        settings.rate_limit_max_requests, settings.rate_limit_window_seconds,
    ),
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(tasks.router)

register_error_handlers(app)
