# Data models for the search layer: what gets chunked, what retrieval returns,
# and how personas are described.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of one document, tagged with the path it came from."""
    source: str
    text: str


@dataclass
class ContextChunk:
    """A chunk returned by RetrievalStore.search, with its cosine score."""
    source: str
    text: str
    score: float

    def render(self) -> str:
        return f"---\nSource: {self.source}\n```\n{self.text}\n```\n"


@dataclass
class Persona:
    """Describes a conversational role: who speaks, on which model, with which docs."""
    name: str
    model: str
    system_prompt: str
    context_paths: List[str] = field(default_factory=list)
