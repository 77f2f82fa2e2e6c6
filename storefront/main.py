# storefront/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.config import Settings, get_settings
from storefront.core.errors import ApiError
from storefront.core.tokens import TokenService
from storefront.database import Database

# Routers
from storefront.routers.auth import router as auth_router
from storefront.routers.cart import router as cart_router
from storefront.routers.contact import router as contact_router
from storefront.routers.users import router as users_router

logger = logging.getLogger("uvicorn")


def create_app(settings: Settings | None = None, db: Database | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: defaults to get_settings() (environment / .env).
        db: store handle; defaults to one bound to settings.DATABASE_URL.
            It is opened on startup and closed on shutdown.
    """
    settings = settings or get_settings()
    db = db or Database(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
          - open the SQLite store and create tables.

        Shutdown:
          - dispose the engine.
        """
        logger.info("🔄 Startup: opening database %s", settings.DATABASE_URL)
        try:
            db.open()
            logger.info("✅ Startup: DB connection OK, tables verified.")
        except Exception as e:
            logger.error(f"❌ Startup: DB connection FAILED: {e}")
            raise
        yield
        db.close()
        logger.info("✅ Shutdown: database connection closed.")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = db
    app.state.tokens = TokenService.from_settings(settings)

    # --- CORS configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(contact_router, prefix=settings.API_PREFIX)
    app.include_router(users_router, prefix=settings.API_PREFIX)
    app.include_router(cart_router, prefix=settings.API_PREFIX)

    @app.get(f"{settings.API_PREFIX}/health", tags=["Health"])
    def health(request: Request):
        """Health check endpoint."""
        connected = request.app.state.db.is_connected()
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "db": "Connected" if connected else "Disconnected",
        }

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"error": ..., "code": ...}."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Express-style: a wrong method on a known path is also "not found"
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": f"Endpoint {request.method} {request.url.path} not found",
                    "code": "NOT_FOUND",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": "HTTP_ERROR"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
        )


settings = get_settings()
logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app(settings)
