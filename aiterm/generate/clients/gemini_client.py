# Gemini chat client over plain HTTP. The streaming body is decoded
# incrementally by StreamDecoder.

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import requests

from ...errors import ModelError
from ..decoder import decode_stream
from ..types import Message
from .base import ModelClient

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient(ModelClient):
    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", timeout: Optional[float] = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def _payload(self, messages: List[Message]) -> dict:
        return {
            "contents": [
                {"role": m.role, "parts": [{"text": m.content}]}
                for m in messages
            ]
        }

    def ask_stream(self, messages: List[Message]) -> Iterator[str]:
        url = f"{GEMINI_API_BASE}/models/{self.model}:streamGenerateContent"
        try:
            resp = requests.post(
                url,
                params={"key": self.api_key},
                json=self._payload(messages),
                stream=True,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ModelError(f"Failed to reach Gemini: {e}") from e

        with resp:
            if not resp.ok:
                raise ModelError(
                    f"API Error: {resp.status_code} - {resp.text}",
                    status_code=resp.status_code,
                    detail=resp.text,
                )
            logger.debug("Streaming response from %s", self.model)
            try:
                yield from decode_stream(resp.iter_content(chunk_size=None))
            except requests.RequestException as e:
                raise ModelError(f"Stream from Gemini broke off: {e}") from e
