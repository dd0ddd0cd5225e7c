"""
Retrieval and answer cache configuration.

Fusion weights, result limits, score thresholds and cache retention
policy for hybrid search and the semantic answer cache.

Dependencies: pydantic, pydantic_settings
System role: Configuration for query-time retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docqa.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Hybrid search and answer cache configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    semantic_weight: float = Field(default=0.6, ge=0.0, description="Weight of the semantic score")
    keyword_weight: float = Field(default=0.4, ge=0.0, description="Weight of the keyword score")
    limit: int = Field(default=20, gt=0, description="Maximum fused results returned")
    semantic_score_floor: float = Field(
        default=0.2,
        description="Semantic matches must score strictly above this value",
    )
    keyword_rank_scale: float = Field(
        default=2.0,
        gt=0.0,
        description="Multiplier applied to normalised keyword relevance before capping at 1.0",
    )
    sub_search_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds allowed for each half of a hybrid search",
    )
    snippet_length: int = Field(default=200, gt=0, description="Characters of chunk content in sources")
    max_question_length: int = Field(default=5000, gt=0, description="Maximum question length")

    cache_enabled: bool = Field(default=True, description="Consult and populate the answer cache")
    cache_similarity_threshold: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for a cache hit (inclusive)",
    )
    cache_retention_days: int = Field(default=90, gt=0, description="Prune horizon in days")
    cache_min_hits: int = Field(
        default=3,
        ge=0,
        description="Entries older than the horizon survive pruning with at least this many hits",
    )
