"""
Mail-Relay runtime configuration.

Loaded once at process start from the environment into an immutable
Settings value, then handed explicitly to the app factory and the
webhook relay. Nothing else in the service reads os.environ.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_WEBHOOK_URL = "http://localhost:5678/webhook-test/mcp-email"
MAX_BODY_BYTES = 10 * 1024


class Settings(BaseModel):
    """Process-wide settings. Frozen after construction."""

    model_config = ConfigDict(frozen=True)

    frontend_origin: Optional[str] = None
    webhook_url: str = DEFAULT_WEBHOOK_URL
    host: str = "0.0.0.0"
    port: int = 3000
    webhook_timeout: float = 10.0  # seconds
    max_body_bytes: int = MAX_BODY_BYTES
    log_level: str = "INFO"

    @property
    def allowed_origins(self) -> list[str]:
        if self.frontend_origin:
            return [self.frontend_origin]
        return ["*"]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, applying defaults for unset ones."""
        env = os.environ if environ is None else environ
        return cls(
            frontend_origin=env.get("FRONTEND_ORIGIN") or None,
            webhook_url=env.get("N8N_WEBHOOK") or DEFAULT_WEBHOOK_URL,
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            webhook_timeout=float(env.get("WEBHOOK_TIMEOUT", "10")),
            log_level=env.get("MAIL_RELAY_LOG_LEVEL", "INFO").upper(),
        )
