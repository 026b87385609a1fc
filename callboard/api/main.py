"""
FastAPI application for the callboard backend.
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ..core.config import VERSION, debug_enabled, request_logging_enabled
from ..core.db import close_db, init_db
from ..util.logging import logger
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup and flush it on shutdown."""
    app.state.db = await init_db()
    logger.info("Callboard backend started")
    try:
        yield
    finally:
        await close_db(app.state.db)
        app.state.db = None
        logger.info("Callboard backend stopped")


# Initialize the FastAPI application
app = FastAPI(
    title="Callboard API",
    version=VERSION,
    description="Agents, groups and indicators of a call-center dashboard",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan,
)

# Set CORS-headers for all responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request as "[time] [host] METHOD 'url'", plus non-object bodies."""
    if request_logging_enabled():
        body = None
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                body = raw.decode("utf-8", errors="replace")

        logger.log_request(
            timestamp=datetime.now(timezone.utc).isoformat(),
            host=request.headers.get("host", ""),
            method=request.method,
            url=str(request.url.path) + (f"?{request.url.query}" if request.url.query else ""),
            body=body,
        )

    return await call_next(request)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Success"


app.include_router(router, prefix="/api")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for structured error responses."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug": str(exc) if debug_enabled() else None}
    )
