# intake/core/exceptions.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

FieldErrors = Dict[str, List[str]]


class GatewayError(Exception):
    """Base error for every failure the gateway reports to a caller."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ClientInputError(GatewayError):
    """Malformed JSON or a body that failed schema validation."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[FieldErrors] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field_errors = field_errors


class ForbiddenOriginError(ClientInputError):
    status_code = 403
    default_message = "Forbidden origin"


class BotVerificationError(GatewayError):
    status_code = 400
    default_message = "Turnstile verification failed"


class ConfigurationError(GatewayError):
    """
    A required setting is missing.

    ``settings`` names the environment variables involved. They are meant for
    server-side logs only; the client message stays generic.
    """

    status_code = 500
    default_message = "Server misconfigured"

    def __init__(self, settings: Sequence[str] = (), **kwargs):
        super().__init__(**kwargs)
        self.settings = list(settings)


class UpstreamError(GatewayError):
    status_code = 502
    default_message = "Upstream error"


class UpstreamTimeoutError(UpstreamError):
    status_code = 504
    default_message = "Upstream timeout"
