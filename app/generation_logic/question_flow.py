import logging
from collections.abc import AsyncGenerator

from app.core.exceptions import NoStreamReturnedError
from app.core.exceptions import UpstreamCallFailedError
from app.generation_logic.stream_relay import relay_events
from app.models.question_models import GenerationRequest
from app.services.generation import GenerationService
from app.services.storage.temp_store import TempFileStore

__all__ = [
    "_start_question_stream",
]

logger = logging.getLogger(__name__)


async def _start_question_stream(
    generation_request: GenerationRequest,
    service: GenerationService,
    store: TempFileStore,
    request_id: str,
) -> AsyncGenerator[str, None]:
    """Call the generation service, drop the consumed uploads, and hand back the SSE relay.

    Errors raised here happen before any byte is streamed, so they still map
    to an HTTP status.
    """
    try:
        result = await service.generate(generation_request, request_id)
    except Exception as e:
        logger.error("[%s] Error generating questions: %s", request_id, str(e), exc_info=True)
        raise UpstreamCallFailedError(str(e) or "Failed to generate questions") from e
    finally:
        # Uploads are consumed once the call has been issued, whatever its outcome
        store.remove_many(generation_request.uploaded_files)

    if result.stream is None:
        logger.error("[%s] Generation service returned no stream", request_id)
        raise NoStreamReturnedError("No stream returned from generation service")

    return relay_events(result.stream, request_id)
