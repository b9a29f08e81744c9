from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Optional, Union

import aiohttp

from intake.core.config import GatewayConfig
from intake.core.exceptions import BotVerificationError, ConfigurationError
from intake.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    error: Optional[Union[BotVerificationError, ConfigurationError]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


def _rejected(message: str) -> VerificationResult:
    return VerificationResult(error=BotVerificationError(message))


class TurnstileVerifier:
    """
    Single-attempt Turnstile siteverify client.

    No explicit timeout is set on this call; it runs under aiohttp's default
    session timeout. Only the upstream delivery has a hard deadline.
    """

    def __init__(self, config: GatewayConfig):
        self.config = config

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationResult:
        secret = self.config.turnstile_secret_key
        if not secret:
            logger.error("turnstile.misconfigured", missing="TURNSTILE_SECRET_KEY")
            return VerificationResult(error=ConfigurationError(["TURNSTILE_SECRET_KEY"]))

        form = {"secret": secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.config.turnstile_verify_url, data=form) as response:
                    status = response.status
                    body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("turnstile.request_failed", error_type=type(e).__name__)
            return _rejected("Turnstile verify failed (network)")

        if not 200 <= status < 300:
            logger.warning("turnstile.http_error", status_code=status)
            return _rejected(f"Turnstile verify failed ({status})")

        try:
            data = json.loads(body)
        except ValueError:
            logger.warning("turnstile.invalid_response", status_code=status)
            return _rejected("Turnstile: invalid response")

        if not isinstance(data, dict) or not data.get("success"):
            codes = data.get("error-codes") if isinstance(data, dict) else None
            joined = ", ".join(str(code) for code in codes) if isinstance(codes, list) else ""
            logger.info("turnstile.rejected", error_codes=codes or [])
            return _rejected(f"Turnstile: {joined or 'unknown'}")

        return VerificationResult()
