# Exception hierarchy shared by the search, generate and converse layers.

from __future__ import annotations
from typing import Optional


class AitermError(Exception):
    """Base class for all errors raised by aiterm."""


class ConfigError(AitermError):
    """Missing credential, unknown model id, or a broken persona file."""


class ServiceError(AitermError):
    """An external service answered with a failure or an unreadable envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class EmbeddingError(ServiceError):
    pass


class ModelError(ServiceError):
    pass
