"""Dependencias reutilizables para rutas de Vapi."""

from functools import lru_cache

from fastapi import Header, HTTPException, status

from order_intake.core.config import settings
from order_intake.core.logging import get_logger
from order_intake.core.security import SignatureError, mask_secret, verify_shared_secret

from .service import CallPipeline, build_call_pipeline

logger = get_logger(__name__)


async def verify_vapi_secret(x_vapi_secret: str | None = Header(default=None)) -> None:
    """Valida el encabezado `x-vapi-secret` cuando hay un secreto configurado."""
    expected = settings.vapi_webhook_secret
    if not expected:
        return
    try:
        verify_shared_secret(expected, x_vapi_secret)
    except SignatureError as exc:
        logger.warning(
            "vapi.secret_rejected", extra={"received": mask_secret(x_vapi_secret)}
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


@lru_cache(maxsize=1)
def get_call_pipeline() -> CallPipeline:
    """Retorna el pipeline configurado a partir de `settings`."""
    return build_call_pipeline(settings)
