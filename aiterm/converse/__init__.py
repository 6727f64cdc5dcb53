# Orchestration: personas -> agents -> single asks and conversations.

from .agents import create_agent, create_embedder
from .orchestrator import (
    Agent,
    Conversation,
    History,
    TurnEvent,
    Utterance,
    build_ask_messages,
    run_conversation,
    run_single_turn,
)
from .personas import list_personas, load_persona

__all__ = [
    "Agent",
    "Conversation",
    "History",
    "TurnEvent",
    "Utterance",
    "build_ask_messages",
    "create_agent",
    "create_embedder",
    "list_personas",
    "load_persona",
    "run_conversation",
    "run_single_turn",
]
