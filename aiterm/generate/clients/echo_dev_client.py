# Dummy model client for local dev and tests: no API calls.

import re
from typing import Iterator, List

from ..types import Message
from .base import ModelClient

_WORD_START = re.compile(r"(?<=\s)(?=\S)")


class EchoDevClient(ModelClient):
    def __init__(self, model: str = "echo-dev"):
        self.model = model

    def ask_stream(self, messages: List[Message]) -> Iterator[str]:
        user_inputs = [m.content for m in messages if m.role == "user"]
        text = f"[ECHO RESPONSE]\n{user_inputs[-1] if user_inputs else '(no user input)'}"
        # one delta per word; whitespace stays attached so deltas join back losslessly
        for piece in _WORD_START.split(text):
            if piece:
                yield piece
