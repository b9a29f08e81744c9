from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict
from unittest.mock import AsyncMock, Mock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from intake.core.config import GatewayConfig
from intake.services.bot_verification import TurnstileVerifier, VerificationResult
from intake.services.forwarder import ForwardResult, UpstreamForwarder

TOKEN = "0.turnstile-token-abcdef"


def make_config(**settings: Any) -> GatewayConfig:
    """Config built from environment-variable names, isolated from any .env file."""
    settings.setdefault("ENVIRONMENT", "testing")
    return GatewayConfig(_env_file=None, **settings)


def financing_body(**overrides: Any) -> Dict[str, Any]:
    body = {
        "type": "financing-calculator",
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@gmail.com",
        "phone": "(941) 555-1234",
        "address1": "123 Palm Ave",
        "city": "Sarasota",
        "state": "FL",
        "zip": "34236",
        "amount": 15000,
        "cfToken": TOKEN,
    }
    body.update(overrides)
    return body


def feedback_body(**overrides: Any) -> Dict[str, Any]:
    body = {
        "type": "feedback",
        "firstName": "Sam",
        "lastName": "Lee",
        "email": "sam@gmail.com",
        "phone": "941-555-0000",
        "rating": 2,
        "message": "Crew was late but the roof looks great.",
        "cfToken": TOKEN,
    }
    body.update(overrides)
    return body


def special_offer_body(**overrides: Any) -> Dict[str, Any]:
    body = {
        "type": "special-offer",
        "firstName": "Ana",
        "lastName": "Ruiz",
        "email": "ana@gmail.com",
        "phone": "1 941 555 7777",
        "offerCode": "SPRING25",
        "offerSlug": "spring-roof-tuneup",
        "cfToken": TOKEN,
    }
    body.update(overrides)
    return body


def contact_body(**overrides: Any) -> Dict[str, Any]:
    body = {
        "type": "contact-lead",
        "firstName": "Lee",
        "lastName": "Park",
        "email": "lee@gmail.com",
        "phone": "9415559999",
        "address1": "9 Gulf Dr",
        "city": "Venice",
        "state": "fl",
        "zip": "34285",
        "projectType": "roof-replacement",
        "cfToken": TOKEN,
    }
    body.update(overrides)
    return body


def legacy_feedback_body(**overrides: Any) -> Dict[str, Any]:
    body = {
        "name": "Sam Lee",
        "email": "sam@gmail.com",
        "phone": "(941) 555-0000",
        "rating": "3",
        "message": "Great job.",
        "cfToken": TOKEN,
    }
    body.update(overrides)
    return body


@pytest.fixture
def spy_verifier():
    verifier = Mock(spec=TurnstileVerifier)
    verifier.verify = AsyncMock(return_value=VerificationResult())
    return verifier


@pytest.fixture
def spy_forwarder():
    forwarder = Mock(spec=UpstreamForwarder)
    forwarder.forward = AsyncMock(return_value=ForwardResult())
    return forwarder


@pytest.fixture
def stand_in_server():
    """Factory for a throwaway aiohttp server: ``async with stand_in_server(routes) as server``."""

    @asynccontextmanager
    async def _serve(routes: Dict[str, Any]):
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_post(path, handler)
        server = TestServer(app)
        await server.start_server()
        try:
            yield server
        finally:
            await server.close()

    return _serve
