"""
Query-time business logic.

Semantic answer cache and grounded answer generation.
"""

from .answer_cache import AnswerCache, CacheHit
from .answer_generator import (
    INSUFFICIENT_INFORMATION,
    GeminiAnswerGenerator,
    is_insufficient_answer,
)

__all__ = [
    "AnswerCache",
    "CacheHit",
    "GeminiAnswerGenerator",
    "INSUFFICIENT_INFORMATION",
    "is_insufficient_answer",
]
