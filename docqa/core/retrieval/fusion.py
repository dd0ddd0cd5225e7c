"""
Weighted score fusion.

Combines semantic and keyword results with a full outer join on chunk id
and a linear weighting of the two scores.

Dependencies: docqa.boundary.vdb.vector_schemas
System role: Pure ranking function behind the hybrid ranker
"""

from typing import Sequence
from uuid import UUID

from docqa.boundary.vdb.vector_schemas import RankedPassage, ScoredChunk, SearchType
from docqa.core.exceptions import ValidationError


def validate_fusion_params(semantic_weight: float, keyword_weight: float, limit: int) -> None:
    """
    Reject weights and limits fuse_scores cannot honour.

    Raises:
        ValidationError: On a negative weight or a non-positive limit
    """
    if semantic_weight < 0:
        raise ValidationError("semantic_weight must be >= 0", field="semantic_weight")
    if keyword_weight < 0:
        raise ValidationError("keyword_weight must be >= 0", field="keyword_weight")
    if limit <= 0:
        raise ValidationError("limit must be > 0", field="limit")


def fuse_scores(
    semantic: Sequence[ScoredChunk],
    keyword: Sequence[ScoredChunk],
    semantic_weight: float = 0.6,
    keyword_weight: float = 0.4,
    limit: int = 20,
) -> list[RankedPassage]:
    """
    Fuse semantic and keyword results into one ranked list.

    A chunk found by both lookups scores s * semantic_weight +
    k * keyword_weight and is tagged HYBRID; a chunk found by one lookup
    scores that lookup's score times its weight. Ordering is by combined
    score descending; ties keep semantic results ahead of keyword-only
    ones, each in their input order.

    Args:
        semantic: Semantic lookup results
        keyword: Keyword lookup results
        semantic_weight: Weight of the semantic score
        keyword_weight: Weight of the keyword score
        limit: Maximum results returned

    Returns:
        list[RankedPassage]: At most `limit` passages, sorted non-increasing

    Raises:
        ValidationError: On a negative weight or a non-positive limit
    """
    validate_fusion_params(semantic_weight, keyword_weight, limit)

    semantic_scores: dict[UUID, float] = {}
    for item in semantic:
        semantic_scores.setdefault(item.chunk_id, item.score)
    keyword_scores: dict[UUID, float] = {}
    for item in keyword:
        keyword_scores.setdefault(item.chunk_id, item.score)

    # Semantic hits first, then keyword-only hits
    order = list(semantic_scores) + [cid for cid in keyword_scores if cid not in semantic_scores]

    fused: list[RankedPassage] = []
    for chunk_id in order:
        s = semantic_scores.get(chunk_id)
        k = keyword_scores.get(chunk_id)
        if s is not None and k is not None:
            search_type = SearchType.HYBRID
        elif s is not None:
            search_type = SearchType.SEMANTIC
        else:
            search_type = SearchType.KEYWORD
        s = s or 0.0
        k = k or 0.0
        fused.append(
            RankedPassage(
                chunk_id=chunk_id,
                semantic_score=s,
                keyword_score=k,
                combined_score=s * semantic_weight + k * keyword_weight,
                search_type=search_type,
            )
        )

    # sort() is stable, so equal scores keep insertion order
    fused.sort(key=lambda passage: passage.combined_score, reverse=True)
    return fused[:limit]
