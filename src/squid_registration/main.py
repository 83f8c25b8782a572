#!/usr/bin/env python3
"""Event registration server - stores sign-ups and notifies a Discord webhook"""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from squid_registration.backends.webhook_client import DiscordWebhookClient
from squid_registration.config import config
from squid_registration.logging_config import get_logger, setup_logging
from squid_registration.models.database import Database
from squid_registration.routers.admin import router as admin_router
from squid_registration.routers.error_handlers import register_exception_handlers
from squid_registration.routers.health import health
from squid_registration.routers.registration import router as registration_router
from squid_registration.services.request_limiter import RequestLimiter
from squid_registration.services.submission_gate import SubmissionGate

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src 'self' https://fonts.gstatic.com; "
        "script-src 'self'; "
        "img-src 'self' data: https:"
    ),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.database.create_tables()
    logger.info("Registration server ready")
    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        gate: SubmissionGate = app.state.submission_gate
        gate.close()
        drained = await gate.drain(app.state.config["shutdown_grace_seconds"])
        if drained:
            await app.state.webhook_client.aclose()
            app.state.database.close()
        else:
            # Submissions still running keep using the client and engine
            logger.warning(
                f"Leaving webhook client and database open for "
                f"{gate.in_flight} in-flight submission(s)"
            )


def create_app(
    app_config: Optional[dict] = None,
    database: Optional[Database] = None,
    webhook_client: Optional[DiscordWebhookClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_config: Overrides merged over the environment config
        database: Store to use instead of one built from database_url
        webhook_client: Webhook transport to use instead of one built from
            discord_webhook_url

    Returns:
        Configured FastAPI app; resources are released by its lifespan
    """
    settings = {**config, **(app_config or {})}

    app = FastAPI(
        title="Squid Game Registration",
        description="Player and guard registrations with Discord notifications",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    app.state.config = settings
    app.state.started_at = time.monotonic()
    app.state.database = database or Database(
        settings["database_url"],
        echo=settings["log_level"].upper() == "DEBUG",
    )
    app.state.webhook_client = webhook_client or DiscordWebhookClient(
        settings["discord_webhook_url"],
        timeout=settings["webhook_timeout_seconds"],
    )
    app.state.submission_gate = SubmissionGate()

    app.state.request_limiter = RequestLimiter(
        settings["global_rate_limit"], settings["global_rate_limit_window_seconds"]
    )

    # Registered before ProxyHeadersMiddleware so it runs inside it and sees
    # the forwarded client address
    @app.middleware("http")
    async def limit_requests(request: Request, call_next):
        limiter: RequestLimiter = request.app.state.request_limiter
        client_ip = request.client.host if request.client else None
        if client_ip and not limiter.allow(client_ip):
            logger.warning(f"Request rate limit hit for {client_ip}")
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests from this IP, please try again later.",
                    "retryAfter": limiter.retry_after,
                },
            )
        return await call_next(request)

    # Client IP comes from X-Forwarded-For only when sent by a trusted proxy
    app.add_middleware(
        ProxyHeadersMiddleware, trusted_hosts=settings["trusted_proxies"]
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings["frontend_url"]],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    register_exception_handlers(app)

    app.include_router(health)
    app.include_router(registration_router)
    app.include_router(admin_router)

    @app.api_route(
        "/api/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def api_not_found(path: str):
        raise HTTPException(status_code=404, detail="Endpoint not found")

    # Registration page, served after the API routes
    static_dir = settings.get("static_dir")
    if static_dir and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


def run():
    port = config["port"]
    logger.info(f"Starting registration server on 0.0.0.0:{port}")
    logger.info(f"Health check: http://localhost:{port}/api/health")

    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=port,
            log_level=config["log_level"].lower(),
            log_config=None,
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise


if __name__ == "__main__":
    run()
