# Embedding backends. Both return a (N, D) float32 matrix index-aligned with
# the input texts; a failure anywhere fails the whole batch.

from __future__ import annotations
import logging
import os
from typing import List, Optional, Protocol

import numpy as np
import requests

from ..errors import ConfigError, EmbeddingError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_EMBED_MODEL = "models/text-embedding-004"
DEFAULT_LOCAL_MODEL = "BAAI/bge-small-en-v1.5"


class Embedder(Protocol):
    def embed(self, texts: List[str]) -> np.ndarray:
        ...


def _as_matrix(vectors: List[List[float]], expected: int) -> np.ndarray:
    if len(vectors) != expected:
        raise EmbeddingError(f"Embedding service returned {len(vectors)} vectors for {expected} inputs")
    try:
        dims = {len(v) for v in vectors}
        if len(dims) != 1:
            raise EmbeddingError(f"Embedding service returned vectors of mixed dimensions: {sorted(dims)}")
        return np.asarray(vectors, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise EmbeddingError(f"Embedding service returned malformed vectors: {e}") from e


class GeminiEmbedder:
    """Batch embeddings through the Gemini `batchEmbedContents` endpoint."""

    def __init__(self, api_key: str, model: str = DEFAULT_EMBED_MODEL, timeout: Optional[float] = None):
        self.api_key = api_key
        self.model = model if model.startswith("models/") else f"models/{model}"
        self.timeout = timeout

    def embed(self, texts: List[str]) -> np.ndarray:
        if not texts:
            return np.empty((0, 0), dtype=np.float32)

        url = f"{GEMINI_API_BASE}/{self.model}:batchEmbedContents"
        payload = {
            "requests": [
                {"model": self.model, "content": {"parts": [{"text": t}]}}
                for t in texts
            ]
        }
        try:
            resp = requests.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise EmbeddingError(f"Failed to send embedding request to API: {e}") from e

        if not resp.ok:
            raise EmbeddingError(
                f"API embedding failed: {resp.status_code}",
                status_code=resp.status_code,
                detail=resp.text,
            )

        try:
            data = resp.json()
            vectors = [e["values"] for e in data["embeddings"]]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingError(f"Failed to parse embedding response: {e}", status_code=resp.status_code) from e

        logger.debug("Embedded %d texts with %s", len(texts), self.model)
        return _as_matrix(vectors, len(texts))


class LocalEmbedder:
    """
    Offline embeddings with a sentence-transformers model.
    The model is loaded on first use and cached on the instance.
    """

    def __init__(self, model_name: str = DEFAULT_LOCAL_MODEL, device: str = "cpu", batch_size: int = 64):
        self.model_name = model_name
        self.device = device
        self.batch_size = batch_size
        self._model = None

    def _get_model(self):
        if self._model is None:
            os.environ.setdefault("TOKENIZERS_PARALLELISM", "false")
            try:
                from sentence_transformers import SentenceTransformer  # heavy import delayed
            except ImportError as e:
                raise ConfigError(
                    "EMBED_PROVIDER=local needs sentence-transformers: pip install aiterm[local]"
                ) from e

            try:
                self._model = SentenceTransformer(self.model_name, device=self.device)
            except Exception as e:
                raise EmbeddingError(f"Failed to load local embedding model '{self.model_name}': {e}") from e
            logger.debug("Loaded local embedding model %s on %s", self.model_name, self.device)
        return self._model

    def embed(self, texts: List[str]) -> np.ndarray:
        if not texts:
            return np.empty((0, 0), dtype=np.float32)
        model = self._get_model()
        try:
            vecs = model.encode(
                texts,
                batch_size=min(self.batch_size, len(texts)),
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e
        out = np.asarray(vecs, dtype=np.float32)
        if out.ndim != 2 or out.shape[0] != len(texts):
            raise EmbeddingError(f"Local model returned shape {out.shape} for {len(texts)} inputs")
        return out
