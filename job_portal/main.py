"""
Job Portal API - Main Application

FastAPI backend with:
- MongoDB for jobs and job applications
- JWT authentication carried in an httpOnly cookie
- CORS restricted to the configured front-end origins

Run: uvicorn job_portal.main:app --reload --proxy-headers
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import ConnectionFailure, PyMongoError

from job_portal.api import api_router
from job_portal.core import cookies, headers
from job_portal.core.config import Settings, get_settings
from job_portal.core.errors import AppError, Unavailable
from job_portal.core.log import configure_logging, get_logger
from job_portal.core.security import TokenCodec, codec_from_settings
from job_portal.db import create_store

logger = get_logger(__name__)


def _error_body(status_code: int, message: str, **extra) -> dict:
    return {"message": message, "status": status_code, **extra}


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy (and store failures) onto JSON error bodies."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body(400, "invalid request", errors=jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(ConnectionFailure)
    async def store_unavailable_handler(request: Request, exc: ConnectionFailure):
        logger.error("Document store unavailable on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=Unavailable.status_code,
            content=_error_body(Unavailable.status_code, Unavailable.default_message),
        )

    @app.exception_handler(PyMongoError)
    async def store_error_handler(request: Request, exc: PyMongoError):
        logger.error("Document store error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content=_error_body(500, "internal server error"))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_error_body(500, "internal server error"))


def create_app(settings: Settings = None, store=None, codec: TokenCodec = None) -> FastAPI:
    """
    Build the application.

    The store handle and token codec are injected here (tests pass a
    MemoryStore and a codec with a fake clock); by default both are built
    from settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create MongoDB indexes on startup, close the client on shutdown."""
        logger.info("Starting Job Portal API (store=%s)", type(app.state.store).__name__)
        try:
            app.state.store.init_indexes()
        except PyMongoError as e:
            logger.warning("Index initialization failed: %s", e)
        yield
        app.state.store.close()
        logger.info("Shutting down")

    app = FastAPI(
        title="Job Portal API",
        description="""
    Jobs and job applications behind a cookie-based JWT gate.

    ## Features
    - **Authentication**: POST /jwt sets an httpOnly `token` cookie, POST /logout clears it
    - **Jobs**: Search by location, filter by salary, sort, paginate; recruiters manage their own postings
    - **Applications**: Apply, list your applications, recruiters accept or reject
    """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)
    app.state.codec = codec or codec_from_settings(settings)

    # Registered first so it runs inside the channel classification
    app.middleware("http")(headers.security_headers_middleware())

    # Secure-channel classification, once per request
    app.middleware("http")(cookies.channel_middleware(settings.trust_forwarded_proto))

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms, %s)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            getattr(request.state, "runtime_env", "unknown"),
        )
        return response

    # Credentials (the token cookie) require explicit origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["Health"], response_class=PlainTextResponse)
    def root():
        return "Job is falling from the sky"

    @app.get("/health", tags=["Health"])
    def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "mongodb": "connected" if app.state.store.ping() else "disconnected",
        }

    return app


app = create_app()
