"""Generation logic package.

This package groups the helpers behind the question endpoint (upload staging,
request validation, the generation call and the SSE relay) so that
`app/api/routes.py` stays focused on HTTP routing.
"""

# Re-export most commonly-used helpers for convenience
from .file_processing import _stage_uploaded_files  # noqa: F401
from .question_flow import _start_question_stream  # noqa: F401
from .request_validation import build_generation_request  # noqa: F401
from .stream_relay import relay_events  # noqa: F401
