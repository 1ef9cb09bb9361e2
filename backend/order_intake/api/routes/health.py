"""Endpoint de salud para balanceadores y monitoreo."""
from fastapi import APIRouter

from order_intake.services.prompts import EXTRACTION_PROMPT_VERSION

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Estado del servicio")
def healthcheck() -> dict[str, str]:
    """Indica que la API está viva y qué versión de instrucciones usa el extractor."""
    return {"status": "ok", "prompt_version": EXTRACTION_PROMPT_VERSION}
