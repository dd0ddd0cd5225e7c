"""
LLM configuration settings.

Google Gemini model identifiers and parameters for the embedding
and answer generation adapters.

Dependencies: pydantic, pydantic_settings
System role: Model provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docqa.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Gemini embedding and chat model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str | None = Field(default=None, description="Google Generative AI API key")
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        ge=0,
        description="Embedding vector dimension; 0 disables the dimension check",
    )
    chat_model: str = Field(default="gemini-2.0-flash", description="Gemini chat model ID")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
    generation_timeout: float | None = Field(
        default=60.0,
        description="Deadline in seconds for a single answer generation",
    )
