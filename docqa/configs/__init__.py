"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from docqa.configs.database import DatabaseSettings
from docqa.configs.ingestion import IngestionSettings
from docqa.configs.llm import LLMSettings
from docqa.configs.retrieval import RetrievalSettings
from docqa.configs.settings import Settings, get_settings

__all__ = [
    "DatabaseSettings",
    "IngestionSettings",
    "LLMSettings",
    "RetrievalSettings",
    "Settings",
    "get_settings",
]
