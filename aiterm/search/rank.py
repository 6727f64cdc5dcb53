# Stateless similarity + ranking helpers used by RetrievalStore.search.

from __future__ import annotations
from typing import List, Sequence

import numpy as np

from .types import Chunk, ContextChunk


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| * |b|), or 0.0 when either vector has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    na = np.linalg.norm(va)
    nb = np.linalg.norm(vb)
    if na == 0.0 or nb == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (na * nb))


def cosine_scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine of `query` against every row of `matrix`; zero-norm rows score 0."""
    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(matrix, dtype=np.float64)
    qn = np.linalg.norm(q)
    if qn == 0.0 or m.shape[0] == 0:
        return np.zeros(m.shape[0], dtype=np.float64)
    norms = np.linalg.norm(m, axis=1)
    dots = m @ q
    scores = np.zeros(m.shape[0], dtype=np.float64)
    nz = norms > 0.0
    scores[nz] = dots[nz] / (norms[nz] * qn)
    return scores


def top_k(chunks: List[Chunk], scores: np.ndarray, k: int) -> List[ContextChunk]:
    """Highest scores first; equal scores keep insertion order."""
    if k <= 0:
        return []
    order = np.argsort(-scores, kind="stable")[:k]
    return [
        ContextChunk(source=chunks[i].source, text=chunks[i].text, score=float(scores[i]))
        for i in order
    ]
