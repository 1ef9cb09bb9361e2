"""Modelos de dominio para pedidos capturados por teléfono."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

UNKNOWN = "Unknown"
DEFAULT_QUANTITY = 1


class ExtractionResult(BaseModel):
    """Los cuatro campos estructurados obtenidos de una transcripción."""

    model_config = ConfigDict(frozen=True)

    caller_name: str = UNKNOWN
    phone_number: str = UNKNOWN
    order: str = UNKNOWN
    quantity: int = DEFAULT_QUANTITY


class CallRecord(BaseModel):
    """Registro final que se entrega al almacenamiento."""

    model_config = ConfigDict(frozen=True)

    created_at: str
    caller_name: str
    phone_number: str
    order: str
    quantity: int
    business_name: str
    call_length: int
    raw_transcript: str

    def to_row(self) -> dict[str, Any]:
        """Serializa el registro con las columnas de la tabla `vapi_call`."""
        return self.model_dump(mode="json")
