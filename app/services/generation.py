"""Client side of the question generation service.

``GenerationService`` is the seam the HTTP layer talks to. The default
implementation runs a short agent pipeline against an OpenAI-compatible
provider: an ``Analyst`` agent condenses the uploaded material, then a
``Formatter`` agent writes the question paper. Each finished agent step is
yielded as ``{agent_name: {"messages": [...], ...}}``.
"""

import logging
from collections.abc import AsyncGenerator
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Protocol

from fastapi import Depends

from app.core.config import settings
from app.models.question_models import GenerationRequest
from app.models.question_models import GenerationResult
from app.models.question_models import UpstreamEvent
from app.services.extractor import extract
from app.services.extractor import is_supported
from app.services.llm import call_llm
from app.services.llm import render_prompt
from app.services.storage.temp_store import TempFileStore
from app.services.storage.temp_store import get_temp_store

logger = logging.getLogger(__name__)

ANALYST_AGENT = "Analyst"
FORMATTER_AGENT = "Formatter"

LLMCaller = Callable[..., Awaitable[str]]


class GenerationService(Protocol):
    async def generate(self, request: GenerationRequest, request_id: str) -> GenerationResult: ...


class QuestionGenerationService:
    """Default generation service backed by OpenRouter."""

    def __init__(self, store: TempFileStore, llm: LLMCaller = call_llm):
        self.store = store
        self.llm = llm

    async def generate(self, request: GenerationRequest, request_id: str) -> GenerationResult:
        """Read the staged documents now and return a lazy agent event stream.

        Documents are read before returning so the caller may delete them
        straight away.
        """
        corpus = await self._load_corpus(request, request_id)
        return GenerationResult(stream=self._run_agents(request, corpus, request_id))

    async def _load_corpus(self, request: GenerationRequest, request_id: str) -> str:
        texts: list[str] = []
        for filename in request.uploaded_files:
            if not is_supported(filename):
                logger.warning("[%s] Skipping %s: unsupported file type", request_id, filename)
                continue
            text = await extract(self.store.record(filename), request_id)
            if text.strip():
                texts.append(text)

        corpus = "\n\n".join(texts)
        if len(corpus) > settings.max_corpus_chars:
            logger.warning(
                "[%s] Corpus truncated from %d to %d chars",
                request_id,
                len(corpus),
                settings.max_corpus_chars,
            )
            corpus = corpus[: settings.max_corpus_chars]
        logger.info("[%s] Corpus ready: %d files, %d chars", request_id, len(texts), len(corpus))
        return corpus

    async def _run_agents(
        self,
        request: GenerationRequest,
        corpus: str,
        request_id: str,
    ) -> AsyncGenerator[UpstreamEvent, None]:
        analysis = await self.llm(
            render_prompt(
                "analyst.jinja2",
                question_header=request.question_header,
                question_description=request.question_description,
                corpus=corpus,
            ),
            api_key=request.api_key,
            model_name=request.model_name,
            request_id=request_id,
        )
        yield {
            ANALYST_AGENT: {
                "messages": [{"role": "assistant", "content": analysis}],
                "analysisResult": analysis,
            }
        }

        questions = await self.llm(
            render_prompt(
                "formatter.jinja2",
                question_header=request.question_header,
                question_description=request.question_description,
                analysis=analysis,
            ),
            api_key=request.api_key,
            model_name=request.model_name,
            request_id=request_id,
        )
        yield {FORMATTER_AGENT: {"messages": [{"role": "assistant", "content": questions}]}}


def get_generation_service(store: TempFileStore = Depends(get_temp_store)) -> GenerationService:
    """FastAPI dependency providing the generation service."""
    return QuestionGenerationService(store)
