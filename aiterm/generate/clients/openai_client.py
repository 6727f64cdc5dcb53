# Client for the OpenAI Chat Completions API, same interface as GeminiClient.

from typing import Iterator, List

from openai import OpenAI, OpenAIError

from ...errors import ModelError
from ..types import Message
from .base import ModelClient

# OpenAI names the non-user side "assistant"
_ROLES = {"model": "assistant"}


class OpenAIClient(ModelClient):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", client=None):
        self.model = model
        self.client = client or OpenAI(api_key=api_key)

    def ask_stream(self, messages: List[Message]) -> Iterator[str]:
        formatted = [{"role": _ROLES.get(m.role, m.role), "content": m.content} for m in messages]
        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=formatted,
                stream=True,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except OpenAIError as e:
            raise ModelError(f"OpenAI request failed: {e}", status_code=getattr(e, "status_code", None)) from e
