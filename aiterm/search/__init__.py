# Exposes the retrieval store, chunker and embedders for convenience.

from .chunker import chunk_text, discover_files, load_and_chunk
from .embedder import Embedder, GeminiEmbedder, LocalEmbedder
from .rank import cosine_similarity
from .retriever import RetrievalStore, build_store
from .types import Chunk, ContextChunk, Persona

__all__ = [
    "Chunk",
    "ContextChunk",
    "Persona",
    "Embedder",
    "GeminiEmbedder",
    "LocalEmbedder",
    "RetrievalStore",
    "build_store",
    "chunk_text",
    "cosine_similarity",
    "discover_files",
    "load_and_chunk",
]
