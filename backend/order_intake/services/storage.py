"""Persistencia de registros de llamadas en Supabase/Postgres vía REST."""

from __future__ import annotations

from typing import Protocol

import httpx

from order_intake.core.logging import get_logger
from order_intake.models.call import CallRecord

logger = get_logger(__name__)


class StorageError(RuntimeError):
    """Errores de persistencia para servicios externos."""


class CallStore(Protocol):
    """Destino opaco para los registros de llamadas."""

    async def insert(self, record: CallRecord) -> None: ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"status={response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text


class SupabaseCallStore:
    """Inserta filas en la tabla de llamadas usando PostgREST."""

    def __init__(
        self,
        *,
        url: str | None,
        service_role: str | None,
        table: str = "vapi_call",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/") if url else None
        self._service_role = service_role
        self._table = table
        self._timeout = timeout
        self._transport = transport

    async def insert(self, record: CallRecord) -> None:
        """Inserta un registro; lanza `StorageError` ante cualquier rechazo."""
        if not self._url or not self._service_role:
            raise StorageError("Supabase no está configurado (SUPABASE_URL/SERVICE_ROLE)")

        url = f"{self._url}/rest/v1/{self._table}"
        headers = {
            "apikey": self._service_role,
            "Authorization": f"Bearer {self._service_role}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, headers=headers, json=[record.to_row()])
        except httpx.RequestError as exc:
            msg = f"Error de red al insertar llamada: {exc}"
            logger.exception("storage.insert_failed", extra={"table": self._table})
            raise StorageError(msg) from exc

        if response.status_code >= 400:
            msg = _error_message(response)
            logger.error(
                "storage.insert_failed",
                extra={
                    "table": self._table,
                    "status": response.status_code,
                    "body": response.text,
                },
            )
            raise StorageError(msg)
