# Shared fakes for the test-suite: no network, no model downloads.

import sys
from pathlib import Path
from typing import Iterator, List

import numpy as np
import pytest

# Make project root importable without installing
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aiterm.generate.clients.base import ModelClient  # noqa: E402
from aiterm.generate.types import Message  # noqa: E402

VOCAB = ["cat", "dog", "fish", "bird"]


class KeywordEmbedder:
    """Bag-of-keywords vectors: one dimension per word in VOCAB."""

    def __init__(self):
        self.calls: List[List[str]] = []

    def embed(self, texts: List[str]) -> np.ndarray:
        self.calls.append(list(texts))
        if not texts:
            return np.empty((0, 0), dtype=np.float32)
        rows = [[t.lower().count(w) for w in VOCAB] for t in texts]
        return np.asarray(rows, dtype=np.float32)


class ScriptedModel(ModelClient):
    """Replies with scripted delta lists, one list per call; records prompts."""

    def __init__(self, replies: List[List[str]], model: str = "scripted", fail_on_call: int = -1):
        self.model = model
        self.replies = list(replies)
        self.prompts: List[str] = []
        self.fail_on_call = fail_on_call

    def ask_stream(self, messages: List[Message]) -> Iterator[str]:
        call = len(self.prompts)
        self.prompts.append(messages[-1].content)
        reply = self.replies[call % len(self.replies)]
        for i, delta in enumerate(reply):
            if call == self.fail_on_call and i == 1:
                from aiterm.errors import ModelError

                raise ModelError("stream broke off", status_code=500)
            yield delta


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def docs_dir(tmp_path):
    d = tmp_path / "docs"
    (d / "sub").mkdir(parents=True)
    (d / "cats.md").write_text("cat cat cat", encoding="utf-8")
    (d / "dogs.txt").write_text("dog dog", encoding="utf-8")
    (d / "sub" / "fish.py").write_text("fish = 1  # fish", encoding="utf-8")
    (d / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (d / "broken.txt").write_bytes(b"\xff\xfe\x00bad")
    (d / "empty.md").write_text("   \n", encoding="utf-8")
    return d
