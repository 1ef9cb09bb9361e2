"""Endpoint de recepción de eventos de llamadas Vapi."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from .deps import get_call_pipeline, verify_vapi_secret
from .schemas import FailedResponse, IgnoredResponse, StoredResponse
from .service import CallPipeline, OutcomeStatus

router = APIRouter(tags=["vapi"])


@router.post(
    "/vapi-webhook",
    summary="Webhook de fin de llamada Vapi",
    response_model=IgnoredResponse | StoredResponse,
    responses={500: {"model": FailedResponse}},
)
async def vapi_webhook(
    request: Request,
    _: None = Depends(verify_vapi_secret),
    pipeline: CallPipeline = Depends(get_call_pipeline),
):
    """Convierte la transcripción de una llamada finalizada en un pedido almacenado."""
    body = await request.body()
    try:
        payload = json.loads(body) if body else None
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload"
        ) from exc

    outcome = await pipeline.handle(payload)
    if outcome.status is OutcomeStatus.FAILED:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=FailedResponse(error=outcome.reason or "").model_dump(),
        )
    if outcome.status is OutcomeStatus.IGNORED:
        return IgnoredResponse(detail=outcome.detail or "")
    return StoredResponse()
