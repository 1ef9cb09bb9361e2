"""Normalización de eventos de fin de llamada enviados por Vapi."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from order_intake.models.call import UNKNOWN

TERMINAL_STATUSES = frozenset({"end", "ended", "completed"})

MISSING_PAYLOAD = "missing payload"
NON_FINAL_STATUS = "non-final status"

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class NotActionable:
    """Evento válido que no produce registro (se confirma sin insertar)."""

    reason: str


@dataclass(frozen=True, slots=True)
class NormalizedCall:
    raw_transcript: str
    business_name: str
    call_length: int
    created_at: str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _render_line(entry: Mapping[str, Any]) -> str:
    role = str(entry.get("role") or "").upper()
    text = entry.get("message") or entry.get("content") or ""
    return f"{role}: {text}"


def build_transcript(messages: Any) -> str:
    """Concatena los mensajes en orden de llegada como `ROL: texto`.

    Entradas que no son objetos se omiten; campos faltantes quedan vacíos.
    """
    if not isinstance(messages, list):
        return ""
    return "\n".join(_render_line(entry) for entry in messages if isinstance(entry, Mapping))


def resolve_business_name(message: Mapping[str, Any], call: Mapping[str, Any]) -> str:
    """Prioriza el asistente del mensaje, luego el de la llamada."""
    name = _as_mapping(message.get("assistant")).get("name")
    if not name:
        name = _as_mapping(call.get("assistant")).get("name")
    return str(name) if name else UNKNOWN


def is_terminal_status(status: Any) -> bool:
    return isinstance(status, str) and status.lower() in TERMINAL_STATUSES


def normalize_event(
    payload: Any, *, clock: Clock = utcnow
) -> NormalizedCall | NotActionable:
    """Convierte el payload del webhook en una llamada normalizada.

    Args:
        payload: Cuerpo JSON recibido; puede venir incompleto o mal formado.
        clock: Fuente de tiempo para `created_at`.

    Returns:
        `NotActionable` cuando no hay mensaje o el estado no es final;
        `NormalizedCall` en otro caso.
    """
    event = _as_mapping(payload)
    message = event.get("message")
    if message is None or not isinstance(message, Mapping):
        return NotActionable(reason=MISSING_PAYLOAD)

    if not is_terminal_status(message.get("status")):
        return NotActionable(reason=NON_FINAL_STATUS)

    artifact = _as_mapping(message.get("artifact"))
    raw_transcript = build_transcript(artifact.get("messages"))
    return NormalizedCall(
        raw_transcript=raw_transcript,
        business_name=resolve_business_name(message, _as_mapping(event.get("call"))),
        call_length=len(raw_transcript),
        created_at=_isoformat(clock()),
    )
