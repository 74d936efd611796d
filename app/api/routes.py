import logging
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import StreamingResponse

from app.core.exceptions import QuestionServiceError
from app.core.exceptions import UploadFailedError
from app.generation_logic.file_processing import _stage_uploaded_files
from app.generation_logic.question_flow import _start_question_stream
from app.generation_logic.request_validation import build_generation_request
from app.models.question_models import UploadResponse
from app.services.generation import GenerationService
from app.services.generation import get_generation_service
from app.services.storage.temp_store import TempFileStore
from app.services.storage.temp_store import get_temp_store

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/generate-questions", response_model=UploadResponse)
async def upload_files(
    request: Request,
    store: TempFileStore = Depends(get_temp_store),
) -> UploadResponse:
    """Stage the ``file-*`` parts of a multipart form in scratch storage.

    The returned ``uploadedFiles`` are passed back, comma separated, to the
    GET endpoint of the same path.
    """
    request_id = str(uuid4())
    try:
        form = await request.form()
        uploaded_files = await _stage_uploaded_files(form, store, request_id)
    except QuestionServiceError:
        raise
    except Exception as e:
        logger.error("[%s] Error processing uploads: %s", request_id, str(e), exc_info=True)
        raise UploadFailedError(str(e) or "Failed to process request") from e
    return UploadResponse(message="success", uploadedFiles=uploaded_files)


@router.get("/generate-questions")
async def generate_questions(
    questionHeader: str | None = None,
    questionDescription: str | None = None,
    apiKey: str | None = None,
    modelName: str | None = None,
    uploadedFiles: str | None = None,
    store: TempFileStore = Depends(get_temp_store),
    service: GenerationService = Depends(get_generation_service),
) -> StreamingResponse:
    """Generate questions from previously uploaded files, streamed as Server-Sent Events.

    Stream messages:
    - ``data: {"type": "markdown", "content": ..., "isMarkdown": true}``
    - ``data: {"type": "error", "content": ...}`` (terminal)
    - ``event: complete`` / ``data: done`` always closes the stream.
    """
    request_id = str(uuid4())
    generation_request = build_generation_request(
        question_header=questionHeader,
        question_description=questionDescription,
        api_key=apiKey,
        model_name=modelName,
        uploaded_files_param=uploadedFiles,
        store=store,
        request_id=request_id,
    )
    logger.info(
        "[%s] /generate-questions called. Model: %s, files: %d",
        request_id,
        generation_request.model_name,
        len(generation_request.uploaded_files),
    )

    relay = await _start_question_stream(generation_request, service, store, request_id)
    return StreamingResponse(relay, media_type="text/event-stream", headers=SSE_HEADERS)
