"""Esquemas de respuesta para el webhook de Vapi."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

STORED_MESSAGE = "Data stored successfully"


class IgnoredResponse(BaseModel):
    """Evento confirmado sin insertar registro."""

    status: Literal["ignored"] = "ignored"
    detail: str


class StoredResponse(BaseModel):
    status: str = STORED_MESSAGE


class FailedResponse(BaseModel):
    """Falla de persistencia o error interno."""

    error: str
