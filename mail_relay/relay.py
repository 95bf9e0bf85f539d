"""
Webhook relay — validates send requests and forwards them to n8n.

The external automation workflow does the actual delivery; this side
only checks the fields, makes a single POST, and normalizes whatever
goes wrong upstream into UpstreamError / UnreachableUpstream. Upstream
response content is logged here and never returned to the caller.
"""

import logging
import re
from typing import Dict

import httpx

from mail_relay.config import Settings
from mail_relay.errors import InvalidRecipient, MissingSubject, UnreachableUpstream, UpstreamError
from mail_relay.models import SendRequest, WebhookPayload

logger = logging.getLogger("mail-relay.relay")

# Deliberately loose: something@something.something, no whitespace
RECIPIENT_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

# Cap on how much of an upstream error body goes into the log
_LOG_BODY_LIMIT = 2000


def validate_send_request(request: SendRequest) -> None:
    """Raise the first failing check. No side effects."""
    if not isinstance(request.to, str) or not RECIPIENT_RE.search(request.to):
        raise InvalidRecipient()
    if not isinstance(request.subject, str) or not request.subject.strip():
        raise MissingSubject()


def build_payload(request: SendRequest) -> WebhookPayload:
    return WebhookPayload(
        to=request.to.strip(),
        subject=request.subject.strip(),
        body=request.body or "",
        messageId=request.messageId,
    )


class WebhookRelay:
    """
    Forwards validated email fields to the configured webhook.

    Usage:
        relay = WebhookRelay(settings, httpx.AsyncClient(timeout=settings.webhook_timeout))
        result = await relay.send(SendRequest(to="a@b.com", subject="Hi"))
        await relay.close()
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self._settings = settings
        self._http = http

    @property
    def webhook_url(self) -> str:
        return self._settings.webhook_url

    async def close(self) -> None:
        await self._http.aclose()

    async def send(self, request: SendRequest) -> Dict[str, str]:
        """Validate, POST once, and return {"status": "sent"} or raise."""
        validate_send_request(request)
        payload = build_payload(request)

        try:
            # Non-streaming request: the response body is read in full before returning
            resp = await self._http.post(
                self.webhook_url,
                json=payload.model_dump(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            logger.error("Webhook unreachable (%s): %s", type(e).__name__, e)
            raise UnreachableUpstream() from e

        if not resp.is_success:
            logger.error(
                "Upstream webhook error %d: %s",
                resp.status_code, resp.text[:_LOG_BODY_LIMIT],
            )
            raise UpstreamError()

        logger.info("Relayed email to %s (messageId=%s)", payload.to, payload.messageId)
        return {"status": "sent"}
