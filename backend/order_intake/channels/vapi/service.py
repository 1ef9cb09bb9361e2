"""Pipeline de procesamiento para llamadas finalizadas en Vapi."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from order_intake.core.config import Settings
from order_intake.core.logging import get_logger, log_event
from order_intake.models.call import CallRecord, ExtractionResult
from order_intake.services import storage
from order_intake.services.extraction import (
    CapabilityError,
    ExtractionCapability,
    ParseError,
    TranscriptExtractor,
)
from order_intake.services.openai import OpenAICompletionCapability

from .events import (
    MISSING_PAYLOAD,
    Clock,
    NormalizedCall,
    NotActionable,
    normalize_event,
    utcnow,
)

logger = get_logger(__name__)

INTERNAL_ERROR = "Internal server error"

IGNORED_MISSING_DETAIL = "Ignored"
IGNORED_NON_FINAL_DETAIL = "Non-final status, no insert"


class OutcomeStatus(str, Enum):
    IGNORED = "ignored"
    STORED = "stored"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class WebhookOutcome:
    """Resultado reportado al transporte HTTP."""

    status: OutcomeStatus
    reason: str | None = None
    record: CallRecord | None = None

    @classmethod
    def ignored(cls, reason: str) -> WebhookOutcome:
        return cls(status=OutcomeStatus.IGNORED, reason=reason)

    @classmethod
    def stored(cls, record: CallRecord) -> WebhookOutcome:
        return cls(status=OutcomeStatus.STORED, record=record)

    @classmethod
    def failed(cls, reason: str) -> WebhookOutcome:
        return cls(status=OutcomeStatus.FAILED, reason=reason)

    @property
    def detail(self) -> str | None:
        """Texto de confirmación para eventos ignorados."""
        if self.status is not OutcomeStatus.IGNORED:
            return self.reason
        if self.reason == MISSING_PAYLOAD:
            return IGNORED_MISSING_DETAIL
        return IGNORED_NON_FINAL_DETAIL


def build_record(call: NormalizedCall, fields: ExtractionResult) -> CallRecord:
    """Combina metadatos de la llamada con los campos extraídos."""
    return CallRecord(
        created_at=call.created_at,
        caller_name=fields.caller_name,
        phone_number=fields.phone_number,
        order=fields.order,
        quantity=fields.quantity,
        business_name=call.business_name,
        call_length=call.call_length,
        raw_transcript=call.raw_transcript,
    )


class CallPipeline:
    """Orquesta normalización, extracción y persistencia de un evento.

    No guarda estado entre eventos; cada invocación es independiente.
    """

    def __init__(
        self,
        *,
        extractor: TranscriptExtractor,
        store: storage.CallStore,
        clock: Clock = utcnow,
    ) -> None:
        self._extractor = extractor
        self._store = store
        self._clock = clock

    async def handle(self, payload: Mapping[str, Any] | Any) -> WebhookOutcome:
        try:
            return await self._process(payload)
        except Exception:  # noqa: BLE001 - se registra y responde fallback
            logger.exception("vapi.pipeline_failed")
            return WebhookOutcome.failed(INTERNAL_ERROR)

    async def _process(self, payload: Any) -> WebhookOutcome:
        normalized = normalize_event(payload, clock=self._clock)
        if isinstance(normalized, NotActionable):
            log_event(logger, "vapi.ignored", reason=normalized.reason)
            return WebhookOutcome.ignored(normalized.reason)

        log_event(
            logger,
            "vapi.transcript_received",
            level=logging.DEBUG,
            call_length=normalized.call_length,
            business_name=normalized.business_name,
        )

        outcome = await self._extractor.run(normalized.raw_transcript)
        if isinstance(outcome, CapabilityError):
            log_event(
                logger,
                "vapi.extraction_degraded",
                level=logging.WARNING,
                kind="capability_error",
                cause=outcome.cause,
            )
        elif isinstance(outcome, ParseError):
            log_event(
                logger,
                "vapi.extraction_degraded",
                level=logging.WARNING,
                kind="parse_error",
                raw=outcome.raw,
            )

        fields = outcome.result
        log_event(
            logger,
            "vapi.extracted",
            level=logging.DEBUG,
            caller_name=fields.caller_name,
            phone_number=fields.phone_number,
            order=fields.order,
            quantity=fields.quantity,
        )

        record = build_record(normalized, fields)
        try:
            await self._store.insert(record)
        except storage.StorageError as exc:
            logger.error("vapi.store_failed", extra={"error": str(exc)})
            return WebhookOutcome.failed(str(exc))

        log_event(logger, "vapi.stored", call_length=record.call_length)
        return WebhookOutcome.stored(record)


def build_call_pipeline(
    config: Settings,
    *,
    capability: ExtractionCapability | None = None,
    store: storage.CallStore | None = None,
) -> CallPipeline:
    """Construye el pipeline a partir de una configuración explícita."""
    if capability is None:
        capability = OpenAICompletionCapability(
            api_key=config.extraction_api_key,
            base_url=config.extraction_base_url,
            model=config.extraction_model,
            temperature=config.extraction_temperature,
        )
    if store is None:
        store = storage.SupabaseCallStore(
            url=config.supabase_url,
            service_role=config.supabase_service_role,
            table=config.supabase_table,
            timeout=config.storage_timeout_seconds,
        )
    extractor = TranscriptExtractor(capability, window=config.transcript_window_chars)
    return CallPipeline(extractor=extractor, store=store)
