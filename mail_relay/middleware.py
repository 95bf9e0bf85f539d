"""
ASGI middleware for Mail-Relay.

Plain ASGI classes. They see responses produced by other middleware
(CORS preflights, 413s) and can buffer the request body before
routing.
"""

import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mail_relay.errors import InternalError, PayloadTooLarge

logger = logging.getLogger("mail-relay.middleware")

SECURITY_HEADERS = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
]


class SecurityHeadersMiddleware:
    """Adds the fixed security headers to every HTTP response."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                names = {name.lower() for name, _ in message.get("headers", [])}
                headers = list(message.get("headers", []))
                headers.extend(h for h in SECURITY_HEADERS if h[0] not in names)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


class CatchAllMiddleware:
    """
    Last line of defence: any exception that escapes the app becomes a
    500 InternalError with a generic body. The traceback is logged.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception:
            logger.error(
                "Unhandled error on %s %s", scope.get("method"), scope.get("path"),
                exc_info=True,
            )
            if response_started:
                # Headers already on the wire; nothing useful left to send
                return
            error = InternalError()
            response = JSONResponse(error.to_dict(), status_code=error.status_code)
            await response(scope, receive, send)


class BodySizeLimitMiddleware:
    """
    Rejects request bodies larger than max_body_bytes with a 413 before
    they reach routing. Checks Content-Length up front, then buffers the
    body (bounded) so chunked uploads are caught too.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = dict(scope.get("headers", [])).get(b"content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = 0
            if declared > self.max_body_bytes:
                await self._reject(scope, receive, send, declared)
                return

        body = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body += message.get("body", b"")
            if len(body) > self.max_body_bytes:
                await self._reject(scope, receive, send, len(body))
                return
            more_body = message.get("more_body", False)

        replayed = False

        async def replay_receive() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay_receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(
            "Rejected %s %s: body of %d bytes exceeds %d",
            scope.get("method"), scope.get("path"), size, self.max_body_bytes,
        )
        error = PayloadTooLarge()
        response = JSONResponse(error.to_dict(), status_code=error.status_code)
        await response(scope, receive, send)
