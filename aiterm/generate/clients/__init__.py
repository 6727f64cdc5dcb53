# Model id -> client implementation. New providers are new entries here,
# never new call sites.

from __future__ import annotations

import logging
from typing import Optional

from ...errors import ConfigError
from .base import ModelClient
from .echo_dev_client import EchoDevClient
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

_OPENAI_PREFIXES = ("gpt-", "o1", "o3", "o4")


def provider_for(model_id: str) -> str:
    """Name of the provider serving `model_id`; raises ConfigError if none does."""
    mid = model_id.strip().lower()
    if mid == "gemini" or mid.startswith("gemini-"):
        return "gemini"
    if mid == "openai" or mid.startswith(_OPENAI_PREFIXES):
        return "openai"
    if mid in ("echo", "echo-dev"):
        return "echo"
    raise ConfigError(f"Unknown model '{model_id}'")


def create_model(
    model_id: str,
    api_key: Optional[str] = None,
    gemini_model: str = "gemini-1.5-flash",
    openai_model: str = "gpt-4o-mini",
    timeout: Optional[float] = None,
) -> ModelClient:
    """
    Build the client for a persona's model id. Bare provider names ("gemini",
    "openai") resolve to the configured default model of that provider.
    """
    provider = provider_for(model_id)
    mid = model_id.strip()

    if provider == "echo":
        return EchoDevClient()

    if not api_key:
        raise ConfigError(f"No API key given for {provider} model '{model_id}'")

    if provider == "gemini":
        name = gemini_model if mid.lower() == "gemini" else mid
        logger.debug("Using Gemini model %s", name)
        return GeminiClient(api_key, model=name, timeout=timeout)

    # the openai SDK is only imported when a persona asks for it
    from .openai_client import OpenAIClient

    name = openai_model if mid.lower() == "openai" else mid
    logger.debug("Using OpenAI model %s", name)
    return OpenAIClient(api_key, model=name)


__all__ = ["ModelClient", "EchoDevClient", "GeminiClient", "create_model", "provider_for"]
