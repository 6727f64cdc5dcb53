# Shared request types for the model clients.

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Message:
    """Single chat message: user or model."""
    role: str
    content: str
