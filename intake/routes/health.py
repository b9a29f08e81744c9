# intake/routes/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from intake.core.config import LEAD_TYPES, GatewayConfig
from intake.routes.deps import get_config

router = APIRouter(tags=["health"])

_started_at = time.monotonic()


class HealthCheckResponse(BaseModel):
    status: str
    service: str
    environment: str
    timestamp: str
    uptime: float
    checks: Dict[str, bool]


@router.get("/health", response_model=HealthCheckResponse)
async def health(config: GatewayConfig = Depends(get_config)) -> HealthCheckResponse:
    """
    Liveness plus configuration presence.

    Reports only whether each setting resolves, never its value. A missing
    delivery target marks the service ``degraded`` since that lead type
    would answer 500.
    """
    checks = {"turnstile": bool(config.turnstile_secret_key)}
    for lead_type in LEAD_TYPES:
        checks[f"upstream.{lead_type}"] = config.resolve_forward_target(lead_type) is not None

    return HealthCheckResponse(
        status="healthy" if all(checks.values()) else "degraded",
        service="lead-intake-gateway",
        environment=config.environment,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - _started_at, 3),
        checks=checks,
    )
