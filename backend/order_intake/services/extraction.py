"""Extracción de campos de pedido a partir de transcripciones de llamadas."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from order_intake.core.logging import get_logger
from order_intake.models.call import DEFAULT_QUANTITY, UNKNOWN, ExtractionResult
from order_intake.services.prompts import EXTRACTION_PROMPT_VERSION, EXTRACTION_SYSTEM_PROMPT

logger = get_logger(__name__)

DEFAULT_WINDOW_CHARS = 3000

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)", re.ASCII)


class ExtractionCapability(Protocol):
    """Servicio externo que convierte una transcripción en JSON."""

    async def complete(self, *, instruction: str, transcript: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ExtractionSuccess:
    result: ExtractionResult


@dataclass(frozen=True, slots=True)
class CapabilityError:
    """La llamada al servicio falló (red, credenciales, status HTTP, timeout)."""

    cause: str
    result: ExtractionResult = field(default_factory=ExtractionResult)


@dataclass(frozen=True, slots=True)
class ParseError:
    """El servicio respondió, pero el contenido no es un objeto JSON."""

    raw: str | None
    result: ExtractionResult = field(default_factory=ExtractionResult)


ExtractionOutcome = ExtractionSuccess | CapabilityError | ParseError


def truncate_transcript(raw_transcript: str, window: int = DEFAULT_WINDOW_CHARS) -> str:
    """Retorna los últimos `window` caracteres de la transcripción."""
    if window <= 0:
        return ""
    return raw_transcript[-window:]


def _coerce_text(value: Any) -> str:
    if not value:
        return UNKNOWN
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def parse_quantity(value: Any) -> int | None:
    """Interpreta el prefijo entero en base 10 de `value`, o None si no hay uno."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # Supera el límite de dígitos de int() en CPython
                return None
    return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def coerce_fields(data: Mapping[str, Any]) -> ExtractionResult:
    """Sanea los campos devueltos por el servicio, campo por campo."""
    quantity = parse_quantity(data.get("quantity"))
    return ExtractionResult(
        caller_name=_coerce_text(data.get("caller_name")),
        phone_number=_coerce_text(data.get("phone_number")),
        order=_coerce_text(data.get("order")),
        quantity=quantity if quantity is not None else DEFAULT_QUANTITY,
    )


class TranscriptExtractor:
    """Envía la ventana final de la transcripción al servicio y normaliza la respuesta.

    Nunca propaga errores: cualquier falla produce un `ExtractionResult` con
    valores por defecto, pero el resultado etiquetado de `run` conserva la
    causa para observabilidad.
    """

    def __init__(
        self,
        capability: ExtractionCapability,
        *,
        window: int = DEFAULT_WINDOW_CHARS,
        instruction: str = EXTRACTION_SYSTEM_PROMPT,
    ) -> None:
        self._capability = capability
        self._window = window
        self._instruction = instruction

    async def run(self, raw_transcript: str) -> ExtractionOutcome:
        transcript = truncate_transcript(raw_transcript, self._window)
        try:
            content = await self._capability.complete(
                instruction=self._instruction, transcript=transcript
            )
        except Exception as exc:  # noqa: BLE001 - cualquier falla degrada a valores por defecto
            cause = f"{type(exc).__name__}: {exc}"
            logger.warning(
                "extraction.capability_failed",
                extra={"error": cause, "prompt_version": EXTRACTION_PROMPT_VERSION},
            )
            return CapabilityError(cause=cause)

        try:
            data = json.loads(content, parse_constant=_reject_constant)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("extraction.parse_failed", extra={"raw": content})
            return ParseError(raw=content)

        if not isinstance(data, Mapping):
            logger.warning("extraction.parse_failed", extra={"raw": content})
            return ParseError(raw=content)

        try:
            result = coerce_fields(data)
        except (TypeError, ValueError):
            logger.warning("extraction.parse_failed", extra={"raw": content})
            return ParseError(raw=content)
        return ExtractionSuccess(result=result)

    async def extract(self, raw_transcript: str) -> ExtractionResult:
        """Variante total: siempre retorna un resultado completo."""
        outcome = await self.run(raw_transcript)
        return outcome.result
