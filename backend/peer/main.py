import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from peer.config import Settings, get_settings
from peer.errors import ClientError, PeerError
from peer.routers import build_sensor_router, health_router
from peer.store import ReadingStore, SqlReadingStore

logger = logging.getLogger("peer.api")

CORS_ALLOW_METHODS = "POST, GET, OPTIONS, PUT, DELETE"


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, default=str)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"


def _allowed_origin(settings: Settings, origin: Optional[str]) -> Optional[str]:
    if "*" in settings.cors_origins:
        return "*"
    if origin and origin in settings.cors_origins:
        return origin
    return None


def create_app(settings: Optional[Settings] = None, store: Optional[ReadingStore] = None) -> FastAPI:
    """Build the API. A store passed in is used as-is and not initialized."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.store is None:
            owned = SqlReadingStore.from_url(settings.database_url)
            try:
                if settings.auto_create_schema:
                    owned.init_schema()
                else:
                    owned.ping()
            except Exception:
                logger.critical("store initialization failed; refusing to start")
                owned.dispose()
                raise
            app.state.store = owned
            logger.info("store ready (%s)", owned.engine.url.render_as_string(hide_password=True))
        yield
        if owned is not None:
            owned.dispose()

    app = FastAPI(
        title="Peer Sensor API",
        description="Ingestion and aggregate queries for environmental sensor readings.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    @app.exception_handler(PeerError)
    async def peer_error_handler(request: Request, exc: PeerError):
        if isinstance(exc, ClientError):
            logger.warning("client error on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning("rejected payload on %s: %s", request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        origin = _allowed_origin(settings, request.headers.get("Origin"))
        if origin:
            response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = "*"
        return response

    @app.middleware("http")
    async def structured_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        req_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = req_id

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = req_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(_json({
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status": status_code,
                "duration_ms": duration_ms,
                "source": request.headers.get(settings.uploader_header),
            }))

    app.include_router(health_router)
    app.include_router(build_sensor_router(settings))

    if settings.enable_metrics:
        Instrumentator().instrument(app).expose(app, include_in_schema=False, should_gzip=True)

    return app


logging.basicConfig(level=get_settings().log_level.upper())
app = create_app()
