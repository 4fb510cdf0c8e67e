from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import admin, public
from app.config import Settings
from app.db import ConnectionCache, EngineFactory, db_ping, get_engine
from app.errors import AppError, fail, store_errors

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _validation_details(exc: RequestValidationError) -> dict:
    details = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        details[".".join(loc) or "request"] = err.get("msg", "Invalid value")
    return details


def create_app(
    settings: Optional[Settings] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Institution Content API", version=VERSION)
    app.state.settings = settings
    app.state.connections = ConnectionCache(settings, engine_factory=engine_factory)
    app.state.summary_cache = admin.SummaryCache()

    # -----------------------------
    # Error envelope
    # -----------------------------
    @app.exception_handler(AppError)
    def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        details = exc.details
        if exc.status_code >= 500 and not settings.expose_error_details:
            details = None
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(fail(exc.message, details)),
        )

    @app.exception_handler(RequestValidationError)
    def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=fail("Validation error", _validation_details(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=fail(str(exc.detail)))

    @app.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        details = str(exc) if settings.expose_error_details else None
        return JSONResponse(status_code=500, content=fail("Internal server error", details))

    # -----------------------------
    # Health checks
    # -----------------------------
    @app.get("/healthz")
    def healthz():
        return {
            "status": "ok",
            "version": app.version,
            "site_url": settings.site_url,
            "time": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/readyz")
    def readyz(engine: Engine = Depends(get_engine)):
        with store_errors("Database is not reachable"):
            db_ping(engine)
        return {"status": "ready", "db": "ok"}

    app.include_router(public.router)
    app.include_router(admin.router)
    return app


app = create_app()
