# Prompt fragments for single-turn asks and multi-agent turns.

from __future__ import annotations
from typing import List

from .types import ContextChunk

TURN_TEMPLATE = """\
YOUR ROLE:
{system_prompt}

{context}

CONVERSATION HISTORY:
---
{history}
---

INSTRUCTIONS: Your name is {name}. Based on your role and the history, provide your response. \
Do NOT include your name or role in the response itself. Just give your conversational reply."""


def join_snippets(chunks: List[ContextChunk]) -> str:
    return "\n".join(c.render() for c in chunks)


def ask_context_block(chunks: List[ContextChunk]) -> str:
    if not chunks:
        return ""
    return f"Here is some relevant context from the local files:\n\n{join_snippets(chunks)}\n"


def turn_context_block(chunks: List[ContextChunk]) -> str:
    if not chunks:
        return ""
    return f"CONTEXT:\n{join_snippets(chunks)}\n"


def build_ask_prompt(system_prompt: str, context: str, question: str) -> str:
    return f"{system_prompt}\n\n{context}\n\nUser question: {question}"


def build_turn_prompt(system_prompt: str, context: str, history: str, name: str) -> str:
    return TURN_TEMPLATE.format(
        system_prompt=system_prompt,
        context=context,
        history=history,
        name=name,
    )
