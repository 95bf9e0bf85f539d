"""Request and response models shared by the parser, relay and routes."""

from typing import Any, Optional

from pydantic import BaseModel


class ParsedMessage(BaseModel):
    """Recipient/subject/body triple derived from an instruction."""
    to: str = ""
    subject: str = ""
    body: str = ""


class MessageRequest(BaseModel):
    # Left loosely typed so non-string values reach the route's own check
    message: Any = None


class MessageResponse(BaseModel):
    messageId: str
    parsed: ParsedMessage
    needsConfirmation: bool = True


class SendRequest(BaseModel):
    """
    Fields submitted for delivery, usually the (possibly edited) output
    of /api/message.

    messageId is a correlation hint echoed unchanged to the webhook,
    whatever its JSON type. It is not checked against previously issued
    ids and carries no authorization meaning.
    """
    # to/subject left loosely typed so the relay reports its own error kinds
    to: Any = None
    subject: Any = None
    body: Optional[str] = None
    messageId: Any = None


class WebhookPayload(BaseModel):
    to: str
    subject: str
    body: str
    messageId: Any = None


class SendResponse(BaseModel):
    status: str = "sent"
