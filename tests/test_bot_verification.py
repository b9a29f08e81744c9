import pytest
from aiohttp import web

from conftest import make_config
from intake.core.exceptions import BotVerificationError, ConfigurationError
from intake.services.bot_verification import TurnstileVerifier


def verifier_for(server, **settings):
    settings.setdefault("TURNSTILE_SECRET_KEY", "turnstile-secret")
    return TurnstileVerifier(make_config(TURNSTILE_VERIFY_URL=str(server.make_url("/siteverify")), **settings))


@pytest.mark.asyncio
async def test_success_sends_form_fields(stand_in_server):
    received = {}

    async def siteverify(request):
        received.update(await request.post())
        return web.json_response({"success": True})

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890", remote_ip="203.0.113.7")

    assert result.ok
    assert received == {
        "secret": "turnstile-secret",
        "response": "token-1234567890",
        "remoteip": "203.0.113.7",
    }


@pytest.mark.asyncio
async def test_remote_ip_omitted_when_unknown(stand_in_server):
    received = {}

    async def siteverify(request):
        received.update(await request.post())
        return web.json_response({"success": True})

    async with stand_in_server({"/siteverify": siteverify}) as server:
        await verifier_for(server).verify("token-1234567890")

    assert "remoteip" not in received


@pytest.mark.asyncio
async def test_rejection_lists_error_codes(stand_in_server):
    async def siteverify(request):
        return web.json_response({"success": False, "error-codes": ["invalid-input-response", "timeout-or-duplicate"]})

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890")

    assert not result.ok
    assert isinstance(result.error, BotVerificationError)
    assert result.error.status_code == 400
    assert result.message == "Turnstile: invalid-input-response, timeout-or-duplicate"


@pytest.mark.asyncio
async def test_rejection_without_codes(stand_in_server):
    async def siteverify(request):
        return web.json_response({"success": False})

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890")

    assert result.message == "Turnstile: unknown"


@pytest.mark.asyncio
async def test_http_error_status(stand_in_server):
    async def siteverify(request):
        return web.Response(status=503, text="down")

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890")

    assert result.message == "Turnstile verify failed (503)"


@pytest.mark.asyncio
async def test_unparsable_body(stand_in_server):
    async def siteverify(request):
        return web.Response(text="<html>oops</html>", content_type="text/html")

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890")

    assert result.message == "Turnstile: invalid response"


@pytest.mark.asyncio
async def test_network_failure(stand_in_server):
    async def siteverify(request):
        return web.json_response({"success": True})

    async with stand_in_server({"/siteverify": siteverify}) as server:
        verifier = verifier_for(server)
    # Server is closed now; the connection is refused.
    result = await verifier.verify("token-1234567890")

    assert isinstance(result.error, BotVerificationError)
    assert result.message == "Turnstile verify failed (network)"


@pytest.mark.asyncio
async def test_missing_secret_is_configuration_error():
    verifier = TurnstileVerifier(make_config(TURNSTILE_VERIFY_URL="http://127.0.0.1:9/siteverify"))
    result = await verifier.verify("token-1234567890")

    assert isinstance(result.error, ConfigurationError)
    assert result.error.status_code == 500
    assert result.message == "Server misconfigured"
    assert result.error.settings == ["TURNSTILE_SECRET_KEY"]


@pytest.mark.asyncio
async def test_undecodable_body(stand_in_server):
    async def siteverify(request):
        return web.Response(body=b"\xff\xfe garbage", content_type="application/json")

    async with stand_in_server({"/siteverify": siteverify}) as server:
        result = await verifier_for(server).verify("token-1234567890")

    assert isinstance(result.error, BotVerificationError)
    assert result.message == "Turnstile: invalid response"
