# Single-turn asks and round-robin multi-agent conversations.
#
# A conversation owns one History. Turns run strictly one after another; a
# turn is appended only after its stream has fully completed, so a failing
# model call or search leaves every earlier turn untouched and the failing
# turn out of the history.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Union

from ..generate.clients.base import ModelClient
from ..generate.types import Message
from ..search.prompts import (
    ask_context_block,
    build_ask_prompt,
    build_turn_prompt,
    turn_context_block,
)
from ..search.retriever import RetrievalStore
from ..search.types import ContextChunk, Persona

logger = logging.getLogger(__name__)


@dataclass
class Agent:
    """One conversation participant."""
    persona: Persona
    model: ModelClient
    store: Optional[RetrievalStore] = None

    @property
    def name(self) -> str:
        return self.persona.name


@dataclass(frozen=True)
class Utterance:
    speaker: str
    text: str


class History:
    """The opening prompt plus every committed turn, in order."""

    def __init__(self, opening_prompt: str):
        self.opening = Utterance(speaker="user", text=opening_prompt)
        self._turns: List[Utterance] = []

    @property
    def turns(self) -> List[Utterance]:
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, speaker: str, text: str) -> None:
        self._turns.append(Utterance(speaker=speaker, text=text))

    def render(self) -> str:
        parts = [f'The user started the conversation with this prompt: "{self.opening.text}"']
        parts.extend(f"{u.speaker}: {u.text}" for u in self._turns)
        return "\n\n".join(parts)


@dataclass
class TurnEvent:
    """
    kind is one of:
      - "start": a turn begins (text is empty)
      - "delta": one streamed piece of the reply
      - "end":   the turn was committed; text is the trimmed reply
    """
    kind: str
    turn: int
    agent: Agent
    text: str = ""


def _search(store: Optional[RetrievalStore], query: str, k: int):
    if store is None:
        return []
    return store.search(query, k)


def build_ask_messages(
    agent: Agent,
    prompt: str,
    rag_chunks: int = 3,
    on_context: Optional[Callable[[List[ContextChunk]], None]] = None,
) -> List[Message]:
    chunks = _search(agent.store, prompt, rag_chunks)
    if on_context is not None and agent.store is not None:
        on_context(chunks)
    content = build_ask_prompt(agent.persona.system_prompt, ask_context_block(chunks), prompt)
    return [Message(role="user", content=content)]


def run_single_turn(
    agent: Agent,
    prompt: str,
    rag_chunks: int = 3,
    stream: bool = False,
    on_context: Optional[Callable[[List[ContextChunk]], None]] = None,
) -> Union[str, Iterator[str]]:
    """
    Ask one persona one question. Retrieval runs before this returns; with
    stream=True the reply comes back as a lazy iterator of deltas. When the
    agent has a store, `on_context` receives the retrieved chunks.
    """
    messages = build_ask_messages(agent, prompt, rag_chunks, on_context)
    if stream:
        return agent.model.ask_stream(messages)
    return agent.model.ask(messages)


class Conversation:
    def __init__(self, agents: List[Agent], opening_prompt: str):
        if not agents:
            raise ValueError("A conversation needs at least one agent")
        self.agents = list(agents)
        self.history = History(opening_prompt)

    @property
    def next_speaker(self) -> Agent:
        return self.agents[len(self.history) % len(self.agents)]

    def turn_messages(self, agent: Agent, rag_chunks: int) -> List[Message]:
        history_text = self.history.render()
        # retrieval follows the conversation, not just the opening prompt
        chunks = _search(agent.store, history_text, rag_chunks)
        content = build_turn_prompt(
            system_prompt=agent.persona.system_prompt,
            context=turn_context_block(chunks),
            history=history_text,
            name=agent.name,
        )
        return [Message(role="user", content=content)]

    def run(self, turn_count: int, rag_chunks: int = 2) -> Iterator[TurnEvent]:
        """Run exactly `turn_count` turns, yielding events as they happen."""
        if turn_count < 0:
            raise ValueError(f"turn_count must be >= 0, got {turn_count}")
        return self._turns(turn_count, rag_chunks)

    def _turns(self, turn_count: int, rag_chunks: int) -> Iterator[TurnEvent]:
        for i in range(turn_count):
            agent = self.agents[i % len(self.agents)]
            yield TurnEvent("start", i, agent)

            messages = self.turn_messages(agent, rag_chunks)
            pieces: List[str] = []
            for delta in agent.model.ask_stream(messages):
                pieces.append(delta)
                yield TurnEvent("delta", i, agent, delta)

            reply = "".join(pieces).strip()
            self.history.append(agent.name, reply)
            logger.debug("Turn %d/%d committed for %s (%d chars)", i + 1, turn_count, agent.name, len(reply))
            yield TurnEvent("end", i, agent, reply)


def run_conversation(
    agents: List[Agent],
    opening_prompt: str,
    turn_count: int,
    rag_chunks: int = 2,
    on_event: Optional[Callable[[TurnEvent], None]] = None,
) -> Conversation:
    """Drive a whole conversation; `on_event` sees every event in order."""
    conv = Conversation(agents, opening_prompt)
    for event in conv.run(turn_count, rag_chunks):
        if on_event is not None:
            on_event(event)
    return conv
