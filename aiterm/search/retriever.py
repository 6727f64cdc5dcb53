# In-memory retrieval store: chunks + a parallel embedding matrix, built once
# per persona and searched with a brute-force cosine scan.

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import numpy as np

from ..errors import EmbeddingError
from .chunker import CHUNK_OVERLAP, MAX_CHUNK_SIZE, load_and_chunk
from .embedder import Embedder, GeminiEmbedder
from .rank import cosine_scores, top_k
from .types import Chunk, ContextChunk

logger = logging.getLogger(__name__)


class RetrievalStore:
    def __init__(self, chunks: List[Chunk], embeddings: np.ndarray, embedder: Embedder):
        if len(chunks) != embeddings.shape[0]:
            raise ValueError(
                f"chunks/embeddings length mismatch: {len(chunks)} != {embeddings.shape[0]}"
            )
        self._chunks = list(chunks)
        self._embeddings = embeddings
        self._embedder = embedder

    # -------------------------
    # Construction
    # -------------------------
    @classmethod
    def build(
        cls,
        paths: Iterable[str],
        embedder: Embedder,
        max_size: int = MAX_CHUNK_SIZE,
        overlap: int = CHUNK_OVERLAP,
    ) -> "RetrievalStore":
        """Discover + chunk every path, then embed all chunks in one batch."""
        chunks = load_and_chunk(paths, max_size=max_size, overlap=overlap)
        if not chunks:
            logger.warning("No text files found in context paths.")
            return cls([], np.empty((0, 0), dtype=np.float32), embedder)

        logger.info("Embedding %d text chunks", len(chunks))
        embeddings = embedder.embed([c.text for c in chunks])
        logger.info("Embedding complete: shape=%s", embeddings.shape)
        return cls(chunks, embeddings, embedder)

    # -------------------------
    # Public API
    # -------------------------
    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> List[Chunk]:
        return list(self._chunks)

    @property
    def dimension(self) -> Optional[int]:
        return int(self._embeddings.shape[1]) if self._chunks else None

    def search(self, query: str, k: int) -> List[ContextChunk]:
        if not self._chunks or k <= 0:
            return []

        qvec = self._embedder.embed([query])
        if qvec.shape[0] != 1:
            raise EmbeddingError(f"Expected one query vector, got {qvec.shape[0]}")
        qvec = qvec[0]
        if qvec.shape[0] != self._embeddings.shape[1]:
            raise EmbeddingError(
                f"Query dim {qvec.shape[0]} != store dim {self._embeddings.shape[1]}"
            )

        scores = cosine_scores(qvec, self._embeddings)
        return top_k(self._chunks, scores, k)


def build_store(
    credential: str,
    paths: Iterable[str],
    model: str = "models/text-embedding-004",
    max_size: int = MAX_CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
    timeout: Optional[float] = None,
) -> RetrievalStore:
    """Build a store whose chunks are embedded through Gemini with `credential`."""
    embedder = GeminiEmbedder(credential, model=model, timeout=timeout)
    return RetrievalStore.build(paths, embedder, max_size=max_size, overlap=overlap)
