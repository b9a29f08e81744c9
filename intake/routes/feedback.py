from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from intake.routes.deps import get_gateway
from intake.schemas.responses import LeadResponse
from intake.services.gateway import LEGACY_FEEDBACK_CHANNEL, LeadGateway
from intake.services.origin_guard import preflight_headers, resolve_client_ip

router = APIRouter()


@router.options("/feedback", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def feedback_preflight(request: Request, gateway: LeadGateway = Depends(get_gateway)) -> Response:
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers=preflight_headers(request.headers, gateway.config.origins()),
    )


@router.post(
    "/feedback",
    response_model=LeadResponse,
    summary="Submit feedback (single-type endpoint)",
)
async def submit_feedback(request: Request, gateway: LeadGateway = Depends(get_gateway)) -> JSONResponse:
    outcome = await gateway.submit(
        LEGACY_FEEDBACK_CHANNEL,
        body=await request.body(),
        headers=request.headers,
        client_ip=resolve_client_ip(request.headers),
    )
    return outcome.to_response()
