"""
Hybrid retrieval.

Cosine similarity, lexical scoring, weighted fusion and the concurrent
hybrid ranker built on them.
"""
