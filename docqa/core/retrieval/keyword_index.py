"""
Lexical relevance scoring.

Plain-query semantics over a scoped set of chunks: the query is
tokenised, stop words are dropped and a chunk matches only when it
contains every remaining term. Matching chunks are scored with BM25+
and squashed into [0, 1].

Dependencies: rank_bm25
System role: Keyword half of hybrid search
"""

import re
from typing import Sequence
from uuid import UUID

from rank_bm25 import BM25Plus

_TOKEN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because been
    before being below between both but by can could did do does doing down during
    each few for from further had has have having he her here hers herself him
    himself his how i if in into is it its itself just me more most my myself no
    nor not now of off on once only or other our ours ourselves out over own same
    she should so some such than that the their theirs them themselves then there
    these they this those through to too under until up very was we were what when
    where which while who whom why will with would you your yours yourself
    yourselves
    """.split()
)


def tokenize(text: str) -> list[str]:
    """Lowercase alphanumeric tokens of `text` without stop words."""
    return [token for token in _TOKEN.findall(text.lower()) if token not in STOP_WORDS]


def query_terms(text: str) -> list[str]:
    """Distinct query tokens in first-seen order."""
    return list(dict.fromkeys(tokenize(text)))


def normalize_relevance(raw: float, scale: float) -> float:
    """
    Map an unbounded relevance score into [0, 1].

    raw / (raw + 1) is scaled by `scale` and capped at 1.0.
    """
    if raw <= 0:
        return 0.0
    return min(1.0, (raw / (raw + 1.0)) * scale)


def score_keyword_matches(
    query: str,
    corpus: Sequence[tuple[UUID, str]],
    scale: float = 2.0,
) -> list[tuple[UUID, float]]:
    """
    Score every corpus entry that contains all query terms.

    Args:
        query: Free-text query
        corpus: (chunk_id, content) pairs forming the search scope
        scale: Multiplier applied before capping at 1.0

    Returns:
        list[tuple[UUID, float]]: Matches sorted by score descending,
        ties in corpus order
    """
    terms = query_terms(query)
    if not terms or not corpus:
        return []

    tokenized = [tokenize(content) for _, content in corpus]
    required = set(terms)
    matches = [i for i, tokens in enumerate(tokenized) if required.issubset(tokens)]
    if not matches:
        return []

    bm25 = BM25Plus(tokenized)
    raw_scores = bm25.get_scores(terms)

    scored = [(corpus[i][0], normalize_relevance(float(raw_scores[i]), scale)) for i in matches]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored
