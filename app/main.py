import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.core.cleanup import cleanup_scratch
from app.core.config import settings
from app.core.exceptions import QuestionServiceError
from app.core.logging import setup_logging

setup_logging()

app = FastAPI(title="Question Stream")

logger = logging.getLogger(__name__)


@app.on_event("startup")
async def startup_event() -> None:
    removed = cleanup_scratch()
    logger.info("Application started successfully (removed %d stale uploads)", removed)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
    return JSONResponse(
        {"message": "Input validation failed", "details": exc.errors()},
        status_code=422,
    )


@app.exception_handler(QuestionServiceError)
async def question_service_exception_handler(_request: Request, exc: QuestionServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(exc.payload, status_code=exc.status_code)


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)
app.include_router(router)
