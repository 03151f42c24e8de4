"""FastAPI application factory and setup."""

import sys
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.lingomate.api.http.app_data import ApplicationDependencies
from src.lingomate.api.http.routers import auth, chat, health, users
from src.lingomate.api.utils.app_startup import (
    configure_logging,
    validate_startup_config,
)
from src.lingomate.core.errors import ConfigurationError, LingoMateError
from src.lingomate.core.services import (
    ChatBridge,
    ChatProvider,
    DbSessionService,
    SessionSettings,
)
from src.lingomate.runtime.config.config_data import ConfigData
from src.lingomate.runtime.context import get_config


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str):
        super().__init__(app)
        self._environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def build_dependencies(
    config: ConfigData,
    database_service: DbSessionService | None = None,
    chat_provider: ChatProvider | None = None,
) -> ApplicationDependencies:
    """Wire the application-wide services; fails fast on missing secrets."""
    validate_startup_config(config)

    database_service = database_service or DbSessionService(config.database)
    database_service.create_all()

    return ApplicationDependencies(
        config=config,
        session_settings=SessionSettings.from_config(config),
        database_service=database_service,
        chat_bridge=ChatBridge(config.chat, provider=chat_provider),
    )


async def handle_domain_error(request: Request, exc: LingoMateError) -> JSONResponse:
    level = "ERROR" if exc.http_status >= 500 else "INFO"
    logger.log(level, f"{exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def create_app(
    config: ConfigData | None = None,
    *,
    database_service: DbSessionService | None = None,
    chat_provider: ChatProvider | None = None,
) -> FastAPI:
    """Build the API. Services are wired at startup, not at import."""
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config)
        logger.info("Starting up application in {} environment", config.app.environment)
        app.state.app_dependencies = build_dependencies(
            config, database_service=database_service, chat_provider=chat_provider
        )
        try:
            yield
        finally:
            logger.info("Shutting down application")

    is_production = config.app.environment == "production"
    app = FastAPI(
        title="LingoMate API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware, environment=config.app.environment)

    cors = config.app.cors
    if is_production and "*" in cors.origins:
        raise ConfigurationError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        start = time.perf_counter()
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": {"code": "INTERNAL_ERROR", "message": "Internal Server Error"},
                        "request_id": request_id,
                    },
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response

    app.add_exception_handler(LingoMateError, handle_domain_error)

    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")

    return app


def main() -> None:
    import uvicorn

    config = get_config()
    try:
        validate_startup_config(config)
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)

    uvicorn.run(
        create_app(config),
        host=config.app.host,
        port=config.app.port,
        access_log=False,  # We handle access logging in middleware
    )


if __name__ == "__main__":
    main()
