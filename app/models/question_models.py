from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

# An upstream event is an opaque mapping keyed by the agent that produced it
UpstreamEvent = dict[str, Any]


class UploadedFileRecord(BaseModel):
    """A staged upload: generated filename and its location on disk."""

    filename: str
    path: str


class GenerationRequest(BaseModel):
    """Validated parameters handed once to the generation service."""

    model_config = ConfigDict(frozen=True)

    question_header: str
    question_description: str
    api_key: str
    uploaded_files: tuple[str, ...] = ()
    model_name: str


@dataclass(frozen=True)
class GenerationResult:
    """What the generation service hands back: a lazy, single-pass event stream."""

    stream: AsyncIterator[UpstreamEvent] | None = None


class OutboundMessage(BaseModel):
    """A single SSE ``data:`` payload sent to the browser."""

    type: Literal["markdown", "error"]
    content: str
    isMarkdown: bool | None = None


class UploadResponse(BaseModel):
    message: str = "success"
    uploadedFiles: list[str] = Field(default_factory=list)
