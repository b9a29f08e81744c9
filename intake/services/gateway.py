"""Lead intake pipeline.

Origin check, JSON parse, honeypot, schema validation, Turnstile, payload
build, upstream delivery. Each stage returns a result; the first failure
ends the request and is translated into the response envelope.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi.responses import JSONResponse

from intake.core.config import GatewayConfig
from intake.core.exceptions import ClientInputError, GatewayError
from intake.core.logging import get_structlog_logger
from intake.schemas.responses import LeadResponse
from intake.services.bot_verification import TurnstileVerifier
from intake.services.forwarder import UpstreamForwarder
from intake.services.honeypot import tripped_field
from intake.services.origin_guard import check_origin
from intake.services.payloads import build_legacy_feedback_payload, build_payload
from intake.services.validation import ValidationResult, parse_lead, parse_legacy_feedback

logger = get_structlog_logger(__name__)

INVALID_JSON = "Invalid JSON"


@dataclass(frozen=True)
class GatewayOutcome:
    status_code: int
    response: LeadResponse

    @classmethod
    def accepted(cls) -> "GatewayOutcome":
        return cls(status_code=200, response=LeadResponse(ok=True))

    @classmethod
    def from_error(cls, error: GatewayError) -> "GatewayOutcome":
        field_errors = error.field_errors if isinstance(error, ClientInputError) else None
        return cls(
            status_code=error.status_code,
            response=LeadResponse(ok=False, error=error.message, field_errors=field_errors),
        )

    def body(self) -> Dict[str, Any]:
        return self.response.body()

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.body())


@dataclass(frozen=True)
class IntakeChannel:
    """How one endpoint parses, shapes and routes its submissions."""

    name: str
    parse: Callable[[Any], ValidationResult]
    build_payload: Callable[[Any], Dict[str, Any]]
    lead_type: Callable[[Any], str]
    use_shared_target: bool = True


LEAD_CHANNEL = IntakeChannel(
    name="lead",
    parse=parse_lead,
    build_payload=build_payload,
    lead_type=lambda lead: lead.type,
)

LEGACY_FEEDBACK_CHANNEL = IntakeChannel(
    name="legacy-feedback",
    parse=parse_legacy_feedback,
    build_payload=build_legacy_feedback_payload,
    lead_type=lambda lead: "feedback",
    use_shared_target=False,
)


class LeadGateway:
    def __init__(
        self,
        config: GatewayConfig,
        verifier: Optional[TurnstileVerifier] = None,
        forwarder: Optional[UpstreamForwarder] = None,
    ):
        self.config = config
        self.verifier = verifier or TurnstileVerifier(config)
        self.forwarder = forwarder or UpstreamForwarder(config)

    def check_origin(self, headers: Mapping[str, str]) -> Optional[GatewayError]:
        return check_origin(headers, self.config.origins())

    async def submit(
        self,
        channel: IntakeChannel,
        *,
        body: bytes,
        headers: Mapping[str, str],
        client_ip: Optional[str] = None,
    ) -> GatewayOutcome:
        log = logger.bind(channel=channel.name)

        origin_error = self.check_origin(headers)
        if origin_error:
            log.warning("origin.rejected", origin=headers.get("origin") or headers.get("referer"))
            return GatewayOutcome.from_error(origin_error)

        try:
            raw = json.loads(body)
        except ValueError:
            return GatewayOutcome.from_error(ClientInputError(INVALID_JSON))

        if isinstance(raw, dict):
            trap = tripped_field(raw)
            if trap:
                # Same response as a real success; nothing is forwarded.
                log.info("honeypot.tripped", field=trap)
                return GatewayOutcome.accepted()

        parsed = channel.parse(raw)
        if not parsed.ok:
            log.info("lead.invalid", fields=sorted(parsed.field_errors or {}))
            return GatewayOutcome.from_error(parsed.error)
        lead = parsed.lead
        lead_type = channel.lead_type(lead)
        log = log.bind(lead_type=lead_type)

        verification = await self.verifier.verify(lead.cf_token, client_ip)
        if not verification.ok:
            log.warning("turnstile.failed", error=verification.message)
            return GatewayOutcome.from_error(verification.error)

        payload = channel.build_payload(lead)
        forwarded = await self.forwarder.forward(lead_type, payload, use_shared=channel.use_shared_target)
        if not forwarded.ok:
            return GatewayOutcome.from_error(forwarded.error)

        log.info("lead.accepted")
        return GatewayOutcome.accepted()
