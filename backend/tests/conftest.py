"""Fixtures compartidas para las pruebas."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from order_intake.channels.vapi.deps import get_call_pipeline
from order_intake.channels.vapi.service import CallPipeline
from order_intake.main import app
from order_intake.models.call import CallRecord
from order_intake.services.extraction import TranscriptExtractor
from order_intake.services.storage import StorageError

FIXED_NOW = datetime(2024, 5, 4, 12, 30, 15, 123000, tzinfo=timezone.utc)


class FakeCapability:
    """Servicio de extracción falso que registra las transcripciones recibidas."""

    def __init__(self, response: str | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.transcripts: list[str] = []
        self.instructions: list[str] = []

    async def complete(self, *, instruction: str, transcript: str) -> str | None:
        self.instructions.append(instruction)
        self.transcripts.append(transcript)
        if self.error is not None:
            raise self.error
        return self.response


class FakeStore:
    """Almacenamiento en memoria con falla opcional."""

    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.records: list[CallRecord] = []

    async def insert(self, record: CallRecord) -> None:
        if self.error is not None:
            raise StorageError(self.error)
        self.records.append(record)


def make_event(
    *,
    status: str | None = "ended",
    messages: list[object] | None = None,
    assistant: str | None = "Pizzeria Roma",
    call_assistant: str | None = None,
) -> dict[str, object]:
    """Construye un payload de fin de llamada similar al que envía Vapi."""
    message: dict[str, object] = {
        "artifact": {
            "messages": messages
            if messages is not None
            else [
                {"role": "user", "message": "I'd like 2 pizzas, this is John, 555-1234"},
                {"role": "bot", "message": "Got it"},
            ]
        }
    }
    if status is not None:
        message["status"] = status
    if assistant is not None:
        message["assistant"] = {"name": assistant}
    event: dict[str, object] = {"message": message}
    if call_assistant is not None:
        event["call"] = {"assistant": {"name": call_assistant}}
    return event


@pytest.fixture(name="capability")
def fixture_capability() -> FakeCapability:
    return FakeCapability(
        response='{"caller_name":"John","phone_number":"555-1234","order":"pizza","quantity":"2"}'
    )


@pytest.fixture(name="store")
def fixture_store() -> FakeStore:
    return FakeStore()


@pytest.fixture(name="pipeline_factory")
def fixture_pipeline_factory() -> Callable[..., CallPipeline]:
    def factory(capability: FakeCapability, store: FakeStore, *, window: int = 3000) -> CallPipeline:
        return CallPipeline(
            extractor=TranscriptExtractor(capability, window=window),
            store=store,
            clock=lambda: FIXED_NOW,
        )

    return factory


@pytest.fixture(name="async_client")
async def fixture_async_client(
    capability: FakeCapability,
    store: FakeStore,
    pipeline_factory: Callable[..., CallPipeline],
) -> AsyncClient:
    """Cliente asíncrono contra la app principal con pipeline falso inyectado."""
    app.dependency_overrides[get_call_pipeline] = lambda: pipeline_factory(capability, store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
