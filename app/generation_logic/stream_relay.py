"""Relays the generation service's agent events to the browser as SSE.

The browser only understands two message kinds (``markdown`` and ``error``)
and a final ``complete`` event, so every upstream event is reduced to one of
those, or dropped.
"""

import json
import logging
import re
from collections.abc import AsyncGenerator
from collections.abc import AsyncIterator
from typing import Any

from app.core.config import settings
from app.models.question_models import OutboundMessage
from app.models.question_models import UpstreamEvent

__all__ = [
    "BUSY_MESSAGE",
    "COMPLETE_EVENT",
    "UNKNOWN_ERROR_MESSAGE",
    "extract_content",
    "format_sse_message",
    "get_agent_tag",
    "is_json_shaped",
    "relay_events",
    "strip_code_fences",
]

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "server is busy currently try again later"
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
COMPLETE_EVENT = "event: complete\ndata: done\n\n"

_FENCE_OPEN_RE = re.compile(r"```(json)?\n")
_FENCE_CLOSE_RE = re.compile(r"```$")


# ---------------------------------------------------------------------------
# Event inspection helpers
# ---------------------------------------------------------------------------


def get_agent_tag(event: UpstreamEvent) -> str | None:
    """Return the event's top-level key, i.e. the agent that produced it."""
    return next(iter(event), None)


def extract_content(event: UpstreamEvent, agent_tag: str) -> str:
    """Pick the text to relay from an agent event.

    ``analysisResult`` wins over the first message's content; anything else
    is serialised whole so that no event passing the agent filter is lost.
    """
    body: Any = event.get(agent_tag)
    if isinstance(body, dict):
        analysis = body.get("analysisResult")
        if analysis:
            return analysis if isinstance(analysis, str) else json.dumps(analysis)
        messages = body.get("messages")
        if isinstance(messages, list) and messages:
            first = messages[0]
            content = first.get("content") if isinstance(first, dict) else getattr(first, "content", None)
            if isinstance(content, str) and content:
                return content
    return json.dumps(event, default=str)


def strip_code_fences(content: str) -> str:
    """Textually remove ```/```json openers and a trailing closing fence."""
    return _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", content))


def is_json_shaped(content: str) -> bool:
    """Busy-signal policy: agent output that looks like JSON means the upstream is overloaded.

    Kept apart from the relay loop so the policy can change on its own.
    """
    stripped = content.lstrip()
    return stripped.startswith("{") or stripped.startswith("[")


def format_sse_message(message: OutboundMessage) -> str:
    return f"data: {message.model_dump_json(exclude_none=True)}\n\n"


# ---------------------------------------------------------------------------
# Relay loop
# ---------------------------------------------------------------------------


async def relay_events(
    stream: AsyncIterator[UpstreamEvent],
    request_id: str,
    agent_tag: str | None = None,
) -> AsyncGenerator[str, None]:
    """Yield SSE frames for ``stream`` until it ends, errors, or turns JSON-shaped.

    Every path ends with exactly one ``complete`` event. The upstream stream is
    closed when the relay stops, including when the client disconnects and the
    response task cancels this generator.
    """
    wanted_tag = agent_tag or settings.formatter_agent
    relayed = 0
    try:
        try:
            async for event in stream:
                tag = get_agent_tag(event)
                if tag != wanted_tag:
                    logger.debug("[%s] Skipping event from agent: %s", request_id, tag)
                    continue

                content = strip_code_fences(extract_content(event, tag))

                if is_json_shaped(content):
                    logger.warning("[%s] JSON content detected from %s, sending busy server message", request_id, tag)
                    yield format_sse_message(OutboundMessage(type="error", content=BUSY_MESSAGE))
                    yield COMPLETE_EVENT
                    return

                relayed += 1
                logger.debug("[%s] Sending markdown chunk %d (length: %d)", request_id, relayed, len(content))
                yield format_sse_message(OutboundMessage(type="markdown", content=content, isMarkdown=True))
        except Exception as e:
            logger.error("[%s] Stream error: %s", request_id, str(e), exc_info=True)
            yield format_sse_message(OutboundMessage(type="error", content=str(e) or UNKNOWN_ERROR_MESSAGE))
            yield COMPLETE_EVENT
            return

        yield COMPLETE_EVENT
    finally:
        aclose = getattr(stream, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("[%s] Stream relay finished after %d markdown message(s).", request_id, relayed)
