"""
Mail-Relay — chat-style email composer backed by an n8n webhook.

Exposes REST API for:
- Parsing a free-text instruction into {to, subject, body}
- Relaying confirmed fields to the delivery webhook
- Liveness checks

Also serves the bundled browser form from /.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from mail_relay.config import Settings
from mail_relay.errors import InvalidInput, MailRelayError
from mail_relay.middleware import BodySizeLimitMiddleware, CatchAllMiddleware, SecurityHeadersMiddleware
from mail_relay.relay import WebhookRelay
from mail_relay.routes import health, message, send

STATIC_DIR = Path(__file__).parent / "static"

settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [mail-relay] %(levelname)s %(name)s: %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("mail-relay")


async def handle_mail_relay_error(request: Request, exc: MailRelayError) -> JSONResponse:
    if exc.status_code < 500:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.kind)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields. Reported as 400, not FastAPI's default 422."""
    logger.info("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    error = InvalidInput()
    return JSONResponse(error.to_dict(), status_code=error.status_code)


def create_app(config: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """
    Build the FastAPI app around an explicit Settings value.

    http_client lets callers (tests) supply their own transport; when
    omitted one is created in the lifespan with the configured timeout
    and closed on shutdown.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage startup and shutdown lifecycle."""
        # Startup
        logger.info("Mail-Relay starting...")
        owns_client = http_client is None
        http = http_client or httpx.AsyncClient(timeout=config.webhook_timeout)
        app.state.relay = WebhookRelay(config, http)
        logger.info(
            "Webhook relay ready (url=%s, timeout=%.1fs)",
            config.webhook_url, config.webhook_timeout,
        )
        logger.info(
            "CORS origins: %s", ", ".join(config.allowed_origins),
        )

        logger.info("Mail-Relay ready")
        yield

        # Shutdown
        logger.info("Mail-Relay shutting down...")
        if owns_client:
            await app.state.relay.close()
        logger.info("Mail-Relay shutdown complete")

    app = FastAPI(
        title="Mail-Relay",
        description="Parses chat instructions into emails and relays them to an n8n webhook",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_exception_handler(MailRelayError, handle_mail_relay_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    # Last added runs first: headers → CORS → catch-all → size limit → routes
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(CatchAllMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    # Mount route modules
    app.include_router(health.router, tags=["health"])
    app.include_router(message.router, prefix="/api", tags=["message"])
    app.include_router(send.router, prefix="/api", tags=["send"])

    if STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

    return app


app = create_app(settings)
