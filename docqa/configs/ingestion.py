"""
Ingestion pipeline configuration.

Chunking parameters, embedding fan-out and upload limits used by the
document ingestion pipeline and the upload endpoint.

Dependencies: pydantic, pydantic_settings
System role: Configuration for document ingestion
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docqa.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Document ingestion configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=1000, gt=0, description="Maximum characters per chunk")
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap budget in characters; overlap // 5 words are carried over",
    )
    embedding_concurrency: int = Field(
        default=5,
        gt=0,
        description="Maximum concurrent embedding requests per document",
    )
    timeout_seconds: float | None = Field(
        default=None,
        description="Deadline for a single ingestion run (None disables it)",
    )
    claim_ttl_seconds: float = Field(
        default=900.0,
        gt=0,
        description="Age after which an ingestion claim left by a crashed worker can be taken over",
    )
    max_error_length: int = Field(
        default=2048,
        gt=0,
        description="Maximum length of the error message stored on a failed document",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
    )
    allowed_media_types: list[str] = Field(
        default=[
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.ms-excel",
            "text/csv",
            "text/plain",
            "text/markdown",
        ],
        description="Media types accepted by the upload endpoint",
    )
