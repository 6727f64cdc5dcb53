from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List

from ..types import Message


class ModelClient(ABC):
    """The one capability every provider implements."""

    model: str

    @abstractmethod
    def ask_stream(self, messages: List[Message]) -> Iterator[str]:
        """Yield response text deltas in order until the stream closes."""

    def ask(self, messages: List[Message]) -> str:
        return "".join(self.ask_stream(messages))
