"""Relay endpoint — forwards confirmed email fields to the webhook."""

from fastapi import APIRouter, Request

from mail_relay.models import SendRequest, SendResponse

router = APIRouter()


@router.post("/send", response_model=SendResponse)
async def send_email(body: SendRequest, request: Request):
    """
    Validate and relay one email. Errors raised by the relay are
    MailRelayError subclasses and are rendered by the app's handlers.
    """
    relay = request.app.state.relay
    result = await relay.send(body)
    return result
