"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values.
"""

from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import NoDecode

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "https://localhost:3000",
    "https://localhost:8000",
    "http://0.0.0.0:8000",
]


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        temp_dir: Scratch directory holding uploads between the upload and generation requests.
        default_model_name: Model used when the client does not send ``modelName``.
        formatter_agent: The only agent tag whose events are relayed to the client.
        openrouter_base_url: Base URL of the OpenAI-compatible provider.
        llm_max_tokens: Token cap for a single agent completion.
        max_corpus_chars: Maximum characters of extracted document text sent to the model.
        cleanup_ttl: Age in seconds after which an unclaimed scratch file is deleted.
        log_level: Level of the ``app`` logger tree.
        cors_allowed_origins: List of allowed origins for CORS.
        LLM_CONNECT_TIMEOUT: LLM client connect timeout in seconds.
        LLM_READ_TIMEOUT: LLM client read timeout in seconds.
    """

    temp_dir: Path = Field(default=Path("temp"))
    default_model_name: str = Field(default="qwen/qwq-32b:free")
    formatter_agent: str = Field(default="Formatter")

    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")
    llm_max_tokens: int = Field(default=4000)
    max_corpus_chars: int = Field(default=200_000)

    cleanup_ttl: int = Field(default=900)
    log_level: str = Field(default="DEBUG")

    # NoDecode: the env value is a comma-separated string, not JSON
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
    )

    LLM_CONNECT_TIMEOUT: float = Field(default=10.0, description="LLM client connect timeout in seconds.")
    LLM_READ_TIMEOUT: float = Field(default=180.0, description="LLM client read timeout in seconds.")

    model_config = {
        "env_file": ".env",
        "protected_namespaces": ("settings_",),
        "env_prefix": "",
        "extra": "ignore",
    }

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        return list(DEFAULT_CORS_ORIGINS)


settings = Settings()
