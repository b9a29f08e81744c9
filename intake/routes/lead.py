from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from intake.routes.deps import get_gateway
from intake.schemas.responses import LeadResponse
from intake.services.gateway import LEAD_CHANNEL, LeadGateway
from intake.services.origin_guard import preflight_headers, resolve_client_ip

router = APIRouter()


@router.options("/lead", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def lead_preflight(request: Request, gateway: LeadGateway = Depends(get_gateway)) -> Response:
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers=preflight_headers(request.headers, gateway.config.origins()),
    )


@router.post(
    "/lead",
    response_model=LeadResponse,
    summary="Submit a website lead",
)
async def submit_lead(request: Request, gateway: LeadGateway = Depends(get_gateway)) -> JSONResponse:
    """
    Accept a financing, feedback, special-offer or contact lead and relay it
    to the CRM. The body is read raw so malformed JSON and honeypot hits are
    handled by the pipeline rather than FastAPI's request validation.
    """
    outcome = await gateway.submit(
        LEAD_CHANNEL,
        body=await request.body(),
        headers=request.headers,
        client_ip=resolve_client_ip(request.headers),
    )
    return outcome.to_response()
