"""
Instruction parsing endpoint.

Turns the user's free-text instruction into editable email fields.
Nothing is sent from here; the client confirms via /api/send.
"""

import logging
import uuid

from fastapi import APIRouter

from mail_relay.errors import InvalidInput
from mail_relay.models import MessageRequest, MessageResponse
from mail_relay.parser import parse_message_text

logger = logging.getLogger("mail-relay.routes.message")

router = APIRouter()


@router.post("/message", response_model=MessageResponse)
async def parse_message(body: MessageRequest):
    """Parse an instruction and hand back a fresh messageId for correlation."""
    message = body.message
    if not isinstance(message, str) or not message.strip():
        raise InvalidInput("Missing or empty message")

    parsed = parse_message_text(message)
    message_id = str(uuid.uuid4())
    logger.info("Parsed message %s (recipient found: %s)", message_id, bool(parsed.to))

    return MessageResponse(messageId=message_id, parsed=parsed, needsConfirmation=True)
