"""Validation of the generation request's query parameters and staged files."""

import logging

from app.core.config import settings
from app.core.exceptions import FilesNotFoundError
from app.core.exceptions import MissingParameterError
from app.models.question_models import GenerationRequest
from app.services.storage.temp_store import TempFileStore

__all__ = [
    "REQUIRED_PARAMETERS",
    "build_generation_request",
    "check_required_parameters",
    "parse_uploaded_files",
    "resolve_uploaded_files",
]

logger = logging.getLogger(__name__)

REQUIRED_PARAMETERS = ("questionHeader", "questionDescription", "apiKey")


def check_required_parameters(
    question_header: str | None,
    question_description: str | None,
    api_key: str | None,
    model_name: str | None,
) -> None:
    """Raise MissingParameterError naming every absent mandatory parameter."""
    received = {
        "questionHeader": bool(question_header),
        "questionDescription": bool(question_description),
        "apiKey": bool(api_key),
        "modelName": bool(model_name),
    }
    missing = [name for name in REQUIRED_PARAMETERS if not received[name]]
    if missing:
        raise MissingParameterError(
            "Missing required parameters. Please provide questionHeader, questionDescription, and apiKey.",
            payload={
                "required": list(REQUIRED_PARAMETERS),
                "missing": missing,
                "received": received,
            },
        )


def parse_uploaded_files(uploaded_files_param: str | None) -> list[str]:
    """Split the comma-separated filename list, dropping blank segments."""
    if not uploaded_files_param:
        return []
    return [name.strip() for name in uploaded_files_param.split(",") if name.strip()]


def resolve_uploaded_files(filenames: list[str], store: TempFileStore, request_id: str) -> list[str]:
    """Keep only the declared files still present in scratch storage.

    A non-empty declaration with nothing on disk is an error; a partial match
    silently proceeds with the files that exist.
    """
    if not filenames:
        logger.warning("[%s] No uploaded files found for processing", request_id)
        return []

    existing = store.existing(filenames)
    logger.info("[%s] Found %d/%d files on disk", request_id, len(existing), len(filenames))

    if not existing:
        raise FilesNotFoundError("Uploaded files not found on server. Please try uploading again.")
    return existing


def build_generation_request(
    *,
    question_header: str | None,
    question_description: str | None,
    api_key: str | None,
    model_name: str | None,
    uploaded_files_param: str | None,
    store: TempFileStore,
    request_id: str,
) -> GenerationRequest:
    effective_model = model_name or settings.default_model_name
    check_required_parameters(question_header, question_description, api_key, effective_model)

    declared = parse_uploaded_files(uploaded_files_param)
    logger.info("[%s] Processing generation request with files: %s", request_id, declared)
    uploaded_files = resolve_uploaded_files(declared, store, request_id)

    return GenerationRequest(
        question_header=question_header,
        question_description=question_description,
        api_key=api_key,
        uploaded_files=tuple(uploaded_files),
        model_name=effective_model,
    )
