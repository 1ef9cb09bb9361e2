"""Pruebas del normalizador de eventos Vapi."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import FIXED_NOW, make_event
from order_intake.channels.vapi.events import (
    MISSING_PAYLOAD,
    NON_FINAL_STATUS,
    NormalizedCall,
    NotActionable,
    build_transcript,
    normalize_event,
)


def _normalize(payload: object) -> NormalizedCall | NotActionable:
    return normalize_event(payload, clock=lambda: FIXED_NOW)


@pytest.mark.parametrize("payload", [None, {}, {"call": {"id": "c1"}}, {"message": None}, [], "x"])
def test_missing_message_is_not_actionable(payload: object) -> None:
    assert _normalize(payload) == NotActionable(reason=MISSING_PAYLOAD)


@pytest.mark.parametrize("status", [None, "in-progress", "ringing", "queued", "ending", 3])
def test_non_terminal_status_is_not_actionable(status: object) -> None:
    event = make_event()
    event["message"]["status"] = status  # type: ignore[index]
    assert _normalize(event) == NotActionable(reason=NON_FINAL_STATUS)


@pytest.mark.parametrize("payload", [{"message": {}}, {"message": {"artifact": {"messages": []}}}])
def test_empty_message_counts_as_present(payload: object) -> None:
    assert _normalize(payload) == NotActionable(reason=NON_FINAL_STATUS)


@pytest.mark.parametrize("status", ["end", "ENDED", "Completed", "ended"])
def test_terminal_status_is_case_insensitive(status: str) -> None:
    assert isinstance(_normalize(make_event(status=status)), NormalizedCall)


def test_transcript_uses_upper_case_roles_in_order() -> None:
    result = _normalize(make_event())

    assert isinstance(result, NormalizedCall)
    assert result.raw_transcript == (
        "USER: I'd like 2 pizzas, this is John, 555-1234\nBOT: Got it"
    )
    assert result.call_length == len(result.raw_transcript)
    assert result.created_at == "2024-05-04T12:30:15.123Z"


def test_text_falls_back_from_message_to_content_to_empty() -> None:
    transcript = build_transcript(
        [
            {"role": "system", "message": "", "content": "You take orders"},
            {"role": "user", "content": "Hello"},
            {"role": "bot"},
        ]
    )
    assert transcript == "SYSTEM: You take orders\nUSER: Hello\nBOT: "


def test_malformed_lines_do_not_break_normalization() -> None:
    transcript = build_transcript([{"message": "no role"}, "junk", None, {"role": "user", "message": "hi"}])
    assert transcript == ": no role\nUSER: hi"


def test_missing_artifact_gives_empty_transcript() -> None:
    event = {"message": {"status": "ended"}}

    result = _normalize(event)

    assert result == NormalizedCall(
        raw_transcript="",
        business_name="Unknown",
        call_length=0,
        created_at="2024-05-04T12:30:15.123Z",
    )


def test_message_assistant_name_wins_over_call_assistant() -> None:
    result = _normalize(make_event(assistant="Message Name", call_assistant="Call Name"))
    assert isinstance(result, NormalizedCall)
    assert result.business_name == "Message Name"


def test_call_assistant_name_is_fallback() -> None:
    result = _normalize(make_event(assistant=None, call_assistant="Call Name"))
    assert isinstance(result, NormalizedCall)
    assert result.business_name == "Call Name"


def test_business_name_defaults_to_unknown() -> None:
    result = _normalize(make_event(assistant=None))
    assert isinstance(result, NormalizedCall)
    assert result.business_name == "Unknown"


def test_created_at_is_converted_to_utc() -> None:
    local = datetime(2024, 5, 4, 7, 30, 15, tzinfo=timezone(timedelta(hours=-5)))

    result = normalize_event(make_event(), clock=lambda: local)

    assert isinstance(result, NormalizedCall)
    assert result.created_at == "2024-05-04T12:30:15.000Z"
