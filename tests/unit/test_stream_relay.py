import json

import pytest

from app.generation_logic.stream_relay import BUSY_MESSAGE
from app.generation_logic.stream_relay import COMPLETE_EVENT
from app.generation_logic.stream_relay import UNKNOWN_ERROR_MESSAGE
from app.generation_logic.stream_relay import extract_content
from app.generation_logic.stream_relay import get_agent_tag
from app.generation_logic.stream_relay import is_json_shaped
from app.generation_logic.stream_relay import relay_events
from app.generation_logic.stream_relay import strip_code_fences


def _formatter(content: str) -> dict:
    return {"Formatter": {"messages": [{"content": content}]}}


async def _collect(stream) -> list[str]:
    return [frame async for frame in relay_events(stream, "test-relay")]


def _payload(frame: str) -> dict:
    assert frame.startswith("data: ") and frame.endswith("\n\n")
    return json.loads(frame[len("data: ") : -2])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_get_agent_tag_returns_sole_key():
    assert get_agent_tag({"Researcher": {"messages": []}}) == "Researcher"
    assert get_agent_tag({}) is None


def test_extract_content_prefers_analysis_result():
    event = {"Formatter": {"messages": [{"content": "from messages"}], "analysisResult": "from analysis"}}
    assert extract_content(event, "Formatter") == "from analysis"


def test_extract_content_uses_first_message():
    event = {"Formatter": {"messages": [{"content": "first"}, {"content": "second"}]}}
    assert extract_content(event, "Formatter") == "first"


def test_extract_content_falls_back_to_whole_event():
    event = {"Formatter": {"unexpected": 1}}
    assert json.loads(extract_content(event, "Formatter")) == event


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('```json\n{"x":1}\n```', '{"x":1}\n'),
        ("```\n## Q1\n```", "## Q1\n"),
        ("plain text", "plain text"),
        ("inline ``` mark stays", "inline ``` mark stays"),
    ],
)
def test_strip_code_fences(raw, expected):
    assert strip_code_fences(raw) == expected


@pytest.mark.parametrize(
    "content, expected",
    [
        ('{"x": 1}', True),
        ("  \n[1, 2]", True),
        ("## Question 1", False),
        ("Answer: {x}", False),
        ("", False),
    ],
)
def test_is_json_shaped(content, expected):
    assert is_json_shaped(content) is expected


# ---------------------------------------------------------------------------
# Relay loop
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_relay_markdown_events_in_order(make_event_stream):
    frames = await _collect(make_event_stream([_formatter("Q1"), _formatter("Q2")]))

    assert len(frames) == 3
    assert _payload(frames[0]) == {"type": "markdown", "content": "Q1", "isMarkdown": True}
    assert _payload(frames[1]) == {"type": "markdown", "content": "Q2", "isMarkdown": True}
    assert frames[2] == COMPLETE_EVENT


@pytest.mark.asyncio
async def test_relay_drops_other_agents(make_event_stream):
    events = [
        {"Researcher": {"messages": [{"content": "notes"}]}},
        _formatter("Q1"),
        {"Reviewer": {"messages": [{"content": "looks good"}], "analysisResult": "ok"}},
    ]
    frames = await _collect(make_event_stream(events))

    assert [_payload(f)["content"] for f in frames[:-1]] == ["Q1"]
    assert frames[-1] == COMPLETE_EVENT


@pytest.mark.asyncio
async def test_relay_only_other_agents_yields_just_completion(make_event_stream):
    frames = await _collect(make_event_stream([{"Analyst": {"messages": [{"content": "{}"}]}}]))
    assert frames == [COMPLETE_EVENT]


@pytest.mark.asyncio
async def test_relay_json_content_short_circuits(make_event_stream):
    consumed: list = []
    events = [_formatter('```json\n{"x":1}\n```'), _formatter("Q2")]
    frames = await _collect(make_event_stream(events, consumed=consumed))

    assert len(frames) == 2
    assert _payload(frames[0]) == {"type": "error", "content": BUSY_MESSAGE}
    assert frames[1] == COMPLETE_EVENT
    # The second event is never pulled from upstream
    assert len(consumed) == 1


@pytest.mark.asyncio
async def test_relay_upstream_error_becomes_error_message(make_event_stream):
    frames = await _collect(make_event_stream([_formatter("Q1")], error=RuntimeError("provider exploded")))

    assert _payload(frames[0])["type"] == "markdown"
    assert _payload(frames[1]) == {"type": "error", "content": "provider exploded"}
    assert frames[2] == COMPLETE_EVENT


@pytest.mark.asyncio
async def test_relay_error_without_description_uses_generic_text(make_event_stream):
    frames = await _collect(make_event_stream([], error=RuntimeError()))

    assert _payload(frames[0]) == {"type": "error", "content": UNKNOWN_ERROR_MESSAGE}
    assert frames[1] == COMPLETE_EVENT


@pytest.mark.asyncio
async def test_relay_closes_upstream_when_consumer_stops():
    closed = []

    async def _stream():
        try:
            yield _formatter("Q1")
            yield _formatter("Q2")
        finally:
            closed.append(True)

    relay = relay_events(_stream(), "test-relay")
    first = await relay.__anext__()
    await relay.aclose()

    assert _payload(first)["content"] == "Q1"
    assert closed == [True]
