"""
Error taxonomy for Mail-Relay.

Every failure the API reports maps to one of these. Handlers in
mail_relay.app turn them into {"error": kind, "detail": message}.
"""

from typing import Any, Dict, Optional


class MailRelayError(Exception):
    """Base class. Subclasses set kind, status_code and a default detail."""

    kind = "InternalError"
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail}


class InvalidInput(MailRelayError):
    kind = "InvalidInput"
    status_code = 400
    default_detail = "Invalid request body"


class InvalidRecipient(InvalidInput):
    kind = "InvalidRecipient"
    default_detail = "Invalid recipient"


class MissingSubject(InvalidInput):
    kind = "MissingSubject"
    default_detail = "Missing subject"


class UpstreamError(MailRelayError):
    """Webhook was reached but answered with a non-2xx status."""
    kind = "UpstreamError"
    status_code = 502
    default_detail = "Upstream webhook error"


class UnreachableUpstream(MailRelayError):
    """Webhook could not be reached (DNS, refused connection, timeout)."""
    kind = "UnreachableUpstream"
    status_code = 502
    default_detail = "Failed to reach webhook"


class PayloadTooLarge(MailRelayError):
    kind = "PayloadTooLarge"
    status_code = 413
    default_detail = "Request body too large"


class InternalError(MailRelayError):
    pass
