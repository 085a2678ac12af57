# backend/userapi/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userapi.api.users_routes import router as users_router
from userapi.core.config import Settings, settings as default_settings
from userapi.core.database import create_tables, init_database
from userapi.core.exceptions import DomainError
from userapi.core.logging_config import setup_logging
from userapi.core.security import make_pwd_context

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_format)

    engine, session_factory = init_database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_tables(engine)
        logger.info("user backend ready (env=%s)", settings.app_env)
        yield
        engine.dispose()

    app = FastAPI(title="User Backend API", version="0.1.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.pwd_context = make_pwd_context(settings.password_hash_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_incoming(request: Request, call_next):
        logger.debug(
            "Incoming %s %s content-type=%s",
            request.method,
            request.url.path,
            request.headers.get("content-type"),
        )
        return await call_next(request)

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "invalid request"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # root health check
    @app.get("/", tags=["health"])
    def root():
        return {"ok": True, "message": "User backend running"}

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    app.include_router(users_router, prefix="/users", tags=["users"])

    return app


app = create_app()
