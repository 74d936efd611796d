import logging
import pathlib
from typing import Any

import httpx
import jinja2
from openai import AsyncOpenAI
from openai import OpenAIError

from app.core.config import settings

# Configure module logger
logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Raised when LLM call fails"""


# --- Reusable Jinja2 Environment ---
PROMPT_DIR = pathlib.Path(__file__).parent / "prompt_templates"
env = jinja2.Environment(loader=jinja2.FileSystemLoader(PROMPT_DIR))

timeout_config = httpx.Timeout(
    settings.LLM_CONNECT_TIMEOUT,
    read=settings.LLM_READ_TIMEOUT,
)


def build_client(api_key: str) -> AsyncOpenAI:
    """OpenRouter client for the caller's own API key."""
    return AsyncOpenAI(
        base_url=settings.openrouter_base_url,
        api_key=api_key,
        default_headers={
            "X-Title": "question-stream",
        },
        timeout=timeout_config,
        max_retries=0,
    )


def render_prompt(template_name: str, **context: Any) -> str:
    try:
        return env.get_template(template_name).render(**context)
    except jinja2.TemplateNotFound:
        logger.error("Template not found: %s", template_name)
        raise LLMError(f"Internal configuration error: Template '{template_name}' not found.") from None


async def call_llm(prompt: str, *, api_key: str, model_name: str, request_id: str) -> str:
    """Single chat completion; returns the stripped message text."""
    logger.info("[%s] Making LLM API call with model: %s", request_id, model_name)
    client = build_client(api_key)
    try:
        rsp = await client.chat.completions.create(
            model=model_name,
            messages=[
                {"role": "user", "content": prompt},
            ],
            max_tokens=settings.llm_max_tokens,
            temperature=0.4,
        )
    except OpenAIError as e:
        logger.error("[%s] OpenAI API error: %s", request_id, str(e))
        raise LLMError(f"OpenAI API error: {str(e)}") from e
    finally:
        await client.close()

    if not rsp or not rsp.choices:
        logger.error("[%s] Invalid response structure from LLM API: %s", request_id, str(rsp))
        raise LLMError("Invalid response structure from LLM API")

    message = rsp.choices[0].message
    if message is None or message.content is None:
        logger.error("[%s] No content in LLM message: %s", request_id, str(message))
        raise LLMError("No content in LLM response")

    content = message.content.strip()
    logger.debug("[%s] LLM response received, length: %d chars", request_id, len(content))
    return content
