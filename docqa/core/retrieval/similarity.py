"""
Cosine similarity helpers.

Dependencies: numpy
System role: Vector scoring shared by semantic search and the answer cache
"""

from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    A zero vector has similarity 0.0 with everything.

    Raises:
        ValueError: If the vectors differ in length
    """
    return float(cosine_similarities(a, [b])[0])


def cosine_similarities(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Cosine similarity of `query` against each row of `vectors`.

    Args:
        query: Query vector
        vectors: Candidate vectors, all the same length as `query`

    Returns:
        np.ndarray: One similarity per candidate, in input order

    Raises:
        ValueError: If any candidate differs in length from the query
    """
    if len(vectors) == 0:
        return np.zeros(0, dtype=np.float64)

    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(vectors, dtype=np.float64)
    if m.ndim != 2 or m.shape[1] != q.shape[0]:
        raise ValueError(f"Vector dimension mismatch: query has {q.shape[0]}")

    norms = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = np.where(norms > 0, dots / norms, 0.0)
    return np.clip(sims, -1.0, 1.0)
