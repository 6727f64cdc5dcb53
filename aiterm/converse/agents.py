# Wiring a Persona into an Agent: model client by model id, plus a retrieval
# store when the persona lists context paths. Every credential comes from the
# Settings object passed in.

from __future__ import annotations

import logging

from ..errors import ConfigError
from ..generate.clients import create_model, provider_for
from ..search.embedder import Embedder, GeminiEmbedder, LocalEmbedder
from ..search.retriever import RetrievalStore
from ..search.types import Persona
from ..settings import Settings
from .orchestrator import Agent

logger = logging.getLogger(__name__)


def create_embedder(settings: Settings) -> Embedder:
    provider = settings.EMBED_PROVIDER.lower()
    if provider == "gemini":
        return GeminiEmbedder(
            settings.api_key_for("gemini"),
            model=settings.EMBED_MODEL,
            timeout=settings.REQUEST_TIMEOUT,
        )
    if provider == "local":
        return LocalEmbedder(settings.LOCAL_EMBED_MODEL)
    raise ConfigError(f"Unknown embedding provider '{settings.EMBED_PROVIDER}'")


def create_agent(persona: Persona, settings: Settings) -> Agent:
    provider = provider_for(persona.model)
    api_key = None if provider == "echo" else settings.api_key_for(provider)
    model = create_model(
        persona.model,
        api_key,
        gemini_model=settings.GEMINI_MODEL,
        openai_model=settings.OPENAI_MODEL,
        timeout=settings.REQUEST_TIMEOUT,
    )

    store = None
    if persona.context_paths:
        logger.info("Building context store for %s from %d paths", persona.name, len(persona.context_paths))
        store = RetrievalStore.build(
            persona.context_paths,
            create_embedder(settings),
            max_size=settings.CHUNK_SIZE,
            overlap=settings.CHUNK_OVERLAP,
        )
    return Agent(persona=persona, model=model, store=store)
