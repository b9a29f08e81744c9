from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from intake.core.config import ForwardTarget, GatewayConfig
from intake.core.exceptions import (
    ConfigurationError,
    GatewayError,
    UpstreamError,
    UpstreamTimeoutError,
)
from intake.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)

UPSTREAM_SEND_FAILED = "Upstream send failed"
SECRET_HEADER = "x-ss-secret"


@dataclass(frozen=True)
class ForwardResult:
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> int:
        return self.error.status_code if self.error else 200

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class UpstreamForwarder:
    """Delivers a normalized payload to the CRM webhook in a single attempt."""

    def __init__(self, config: GatewayConfig):
        self.config = config

    async def forward(
        self,
        lead_type: str,
        payload: Dict[str, Any],
        use_shared: bool = True,
    ) -> ForwardResult:
        """
        POST ``payload`` as JSON to the target resolved for ``lead_type``.

        Network I/O is skipped entirely when nothing resolves.
        """
        resolved = self.config.resolve_forward_target(lead_type, use_shared=use_shared)
        if resolved is None:
            missing = self.config.forward_settings_for(lead_type, use_shared=use_shared)
            logger.error("forward.misconfigured", lead_type=lead_type, settings=missing)
            return ForwardResult(error=ConfigurationError(missing))

        return await self._post(lead_type, resolved, payload)

    async def _post(self, lead_type: str, target: ForwardTarget, payload: Dict[str, Any]) -> ForwardResult:
        headers = {
            "content-type": "application/json",
            SECRET_HEADER: target.secret,
            "origin": self.config.site_url,
        }
        timeout = aiohttp.ClientTimeout(total=self.config.upstream_timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(target.url, data=json.dumps(payload), headers=headers) as response:
                    status = response.status
                    body = await response.read()
        except asyncio.TimeoutError:
            # Checked first: aiohttp's timeout errors also derive from ClientError.
            logger.error("upstream.timeout", lead_type=lead_type, timeout=self.config.upstream_timeout_seconds)
            return ForwardResult(error=UpstreamTimeoutError())
        except aiohttp.ClientError as e:
            logger.error("upstream.error", lead_type=lead_type, error=str(e)[:200])
            return ForwardResult(error=UpstreamError())

        try:
            data = json.loads(body)
        except ValueError:
            data = None
        record = data if isinstance(data, dict) else {}
        upstream_ok = record.get("ok") is True
        error_message = record.get("error") if isinstance(record.get("error"), str) else UPSTREAM_SEND_FAILED

        if not 200 <= status < 300 or not upstream_ok:
            logger.error(
                "upstream.rejected",
                lead_type=lead_type,
                status_code=status,
                upstream_ok=upstream_ok,
                error=error_message,
            )
            return ForwardResult(error=UpstreamError(error_message, status_code=status or 502))

        logger.info("lead.forwarded", lead_type=lead_type, status_code=status)
        return ForwardResult()
