"""Core custom exceptions for the application.

Each error carries the HTTP status and JSON body it is reported with, so the
handler registered in ``app.main`` can turn any of them into a response.
"""

from typing import Any


class QuestionServiceError(Exception):
    """Base exception for errors reported to the client before streaming starts."""

    status_code: int = 500

    def __init__(self, message: str, payload: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.payload: dict[str, Any] = {"message": message, **(payload or {})}


class MissingParameterError(QuestionServiceError):
    """One or more of the mandatory query parameters is absent."""

    status_code = 400


class FilesNotFoundError(QuestionServiceError):
    """None of the declared uploaded files exist in scratch storage."""

    status_code = 400


class UploadFailedError(QuestionServiceError):
    """Staging an uploaded file on disk failed."""


class UpstreamCallFailedError(QuestionServiceError):
    """The generation service rejected or failed the call."""


class NoStreamReturnedError(QuestionServiceError):
    """The generation service answered without an event stream."""


class UnsupportedFileTypeError(QuestionServiceError):
    """An uploaded file has an extension no extractor can read."""

    status_code = 400
