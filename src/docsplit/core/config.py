"""Settings loaded from the environment (``DOCSPLIT_*``) or a local ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_SOURCE_BYTES = 100 * 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Artifact I/O
    max_source_bytes: int = Field(default=MAX_SOURCE_BYTES, gt=0)
    chunk_size: int = Field(default=1024 * 1024, gt=0)
    storage_backend: str = "local"
    storage_root: Path = Path(".")
    http_timeout: float = 300.0

    # Azure Blob (only read by the "azure" backend)
    azure_connection_string: str | None = None
    azure_account_url: str | None = None
    azure_container: str = "results"

    # Orchestration
    max_concurrency: int = Field(default=4, ge=1)
    log_level: str = "INFO"

    # Rendering
    label_font: str = "helv"
    document_font_size: float = 12.0
    field_font_size: float = 8.0
    document_stroke_width: float = 3.0
    field_stroke_width: float = 2.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
