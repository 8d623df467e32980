"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CSRF, body limit, security headers, request context, CORS)
  - Mount the API router under the configured prefix (default /api/v1)
  - Expose health and readiness endpoints (unprefixed)

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - CSRFMiddleware: double-submit protection for the auth routes
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: feature routers (auth, users, activation, admin)

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - In test environments (APP_ENV=test) the DB pool is not opened; the container
    wires in-memory adapters instead

Notes:
  - Middleware order matters (last added = first to execute):
    CORS → RequestContext → SecurityHeaders → BodyLimit → CSRF → routes
  - /healthz and /readyz follow the Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..crosscutting.config import get_settings
from ..crosscutting.csrf import CSRFMiddleware
from ..crosscutting.logger import configure_logging, logger
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..infrastructure.db import close_pool, get_pool, init_pool, is_pool_initialized
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers

APP_TITLE = "Accounts API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Configures logging and the DB pool."""
    settings = get_settings()
    configure_logging(settings)

    # R: Con adapters in-memory no hay base de datos que abrir.
    uses_database = not settings.is_test()
    if uses_database:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    logger.info(
        "Accounts API iniciando",
        extra={
            "app_env": settings.app_env,
            "api_prefix": settings.api_prefix,
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
            "csrf_prefixes": settings.get_csrf_protected_prefixes(),
        },
    )

    try:
        yield
    finally:
        if uses_database:
            close_pool()
        logger.info("Accounts API detenida")


def _check_database() -> str:
    if get_settings().is_test():
        return "in_memory"
    if not is_pool_initialized():
        return "disconnected"
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1")
    except Exception as exc:
        logger.warning("Health check: DB no disponible", extra={"error": str(exc)})
        return "disconnected"
    return "connected"


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Session authentication (cookie or bearer)"},
            {"name": "users", "description": "User management with optimistic locking"},
            {"name": "activation", "description": "Account activation tokens"},
            {"name": "admin", "description": "Maintenance and audit (X-Admin-Token)"},
            {"name": "health", "description": "Liveness and readiness"},
        ],
    )

    # R: Orden de middlewares (el último agregado se ejecuta primero).
    app.add_middleware(CSRFMiddleware)
    app.add_middleware(BodyLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Request-Id",
            settings.csrf_header_name,
            "X-Admin-Token",
        ],
    )

    app.include_router(router, prefix=settings.api_prefix)
    register_exception_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz(request: Request):
        """Liveness: el proceso responde. Incluye estado de DB informativo."""
        db_status = _check_database()
        return {
            "ok": True,
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/readyz", tags=["health"])
    def readyz(request: Request):
        """Readiness: la base de datos responde."""
        db_status = _check_database()
        return {
            "ok": db_status in {"connected", "in_memory"},
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()
