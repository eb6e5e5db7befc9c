from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware
from .config import settings
from .errors import AppError
from .templating import templates
import logging
import time
import uuid
from .routers.pages import router as pages_router
from .routers.auth import router as auth_router
from .routers.admin import router as admin_router
from .routers.landing_pages import router as landing_pages_router
from pathlib import Path


def create_app() -> FastAPI:
    app = FastAPI(title="KashPages", version="0.1.0")
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())
    logger = logging.getLogger(__name__)

    static_dir = Path(__file__).resolve().parent / "static"

    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    app.state.templates = templates
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.APP_SECRET,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        same_site="strict",
        https_only=settings.is_production,
    )

    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        t0 = time.perf_counter()
        req_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        response = await call_next(request)
        total = time.perf_counter() - t0
        response.headers["X-Process-Time"] = f"{total:.3f}"
        response.headers["X-Request-ID"] = req_id
        if request.url.path.startswith("/static/"):
            response.headers.setdefault("Cache-Control", "public, max-age=31536000, immutable")
        elif request.url.path.startswith(("/api/", "/admin")):
            response.headers.setdefault("Cache-Control", "no-store")
        logger.info(
            "request id=%s method=%s path=%s status=%s total_ms=%.1f",
            req_id,
            request.method,
            request.url.path,
            response.status_code,
            total * 1000,
        )
        return response

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("app_error path=%s type=%s msg=%s", request.url.path, type(exc).__name__, exc)
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"success": False, "error": "Invalid request"}, status_code=400)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("database_error path=%s", request.url.path, exc_info=exc)
        return JSONResponse({"success": False, "error": "Server error"}, status_code=500)

    app.include_router(auth_router)
    app.include_router(landing_pages_router)
    app.include_router(admin_router)

    @app.get("/health", include_in_schema=False)
    def healthcheck():
        return {"status": "ok"}

    # catch-all /{slug} goes last
    app.include_router(pages_router)

    return app


app = create_app()
