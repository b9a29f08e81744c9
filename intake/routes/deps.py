from __future__ import annotations

from fastapi import Request

from intake.core.config import GatewayConfig
from intake.services.gateway import LeadGateway


def get_gateway(request: Request) -> LeadGateway:
    return request.app.state.gateway


def get_config(request: Request) -> GatewayConfig:
    return request.app.state.gateway.config
