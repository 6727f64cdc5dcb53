# ============================================================
# aiterm command line
# ------------------------------------------------------------
#   aiterm ask -p <persona> [--stream] [--rag-chunks N] PROMPT...
#   aiterm converse -p <p1> <p2> [...] [--turns N] [--rag-chunks N] -- PROMPT...
#   aiterm personas
# ============================================================

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .converse import (
    TurnEvent,
    create_agent,
    list_personas,
    load_persona,
    run_conversation,
    run_single_turn,
)
from .errors import AitermError, ConfigError
from .settings import Settings

logger = logging.getLogger("aiterm")


def parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="aiterm", description="Talk to personas, alone or in a group.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Ask one persona a question")
    ask.add_argument("-p", "--persona", required=True)
    ask.add_argument("prompt", nargs="+")
    ask.add_argument("--stream", action="store_true", help="Print the response as it streams in")
    ask.add_argument("--rag-chunks", type=int, default=3, help="Context chunks to retrieve")

    conv = sub.add_parser("converse", help="Let several personas talk in turns")
    conv.add_argument("-p", "--persona", nargs="+", required=True)
    conv.add_argument("prompt", nargs="+")
    conv.add_argument("--turns", type=int, default=4, help="Each agent speaking once is a turn")
    conv.add_argument("--rag-chunks", type=int, default=2, help="Context chunks to retrieve per turn")

    sub.add_parser("personas", help="List available personas")
    return p.parse_args(argv)


def _flush_print(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def run_ask(args: argparse.Namespace, settings: Settings) -> None:
    persona = load_persona(args.persona, settings.PERSONAS_DIR)
    print(f"Using persona: '{persona.name}' (Model: {persona.model})")

    if persona.context_paths:
        print("Indexing context files...")
    agent = create_agent(persona, settings)

    prompt = " ".join(args.prompt)
    print(f"\nAsking: {prompt}...")

    if agent.store is not None:
        print("Searching for relevant context via API...")

    def found(chunks) -> None:
        if chunks:
            print(f"Found {len(chunks)} relevant context snippets.")

    if args.stream:
        deltas = run_single_turn(agent, prompt, rag_chunks=args.rag_chunks, stream=True, on_context=found)
        print("\n--- Response Stream ---")
        for delta in deltas:
            _flush_print(delta)
        print()
    else:
        response = run_single_turn(agent, prompt, rag_chunks=args.rag_chunks, on_context=found)
        print(f"\n--- Response ---\n{response}")


def run_converse(args: argparse.Namespace, settings: Settings) -> None:
    if len(args.persona) < 2:
        raise ConfigError("converse needs at least two personas")
    if args.turns < 0:
        raise ConfigError("--turns must not be negative")

    print(f"Starting a conversation with: {', '.join(args.persona)}")
    agents = [create_agent(load_persona(key, settings.PERSONAS_DIR), settings) for key in args.persona]

    def show(event: TurnEvent) -> None:
        if event.kind == "start":
            print(f"\n--- Turn {event.turn + 1}/{args.turns} | Speaking: {event.agent.name} ---")
        elif event.kind == "delta":
            _flush_print(event.text)

    run_conversation(agents, " ".join(args.prompt), args.turns, rag_chunks=args.rag_chunks, on_event=show)
    print("\n\n--- Conversation Finished ---")


def run_personas(settings: Settings) -> None:
    keys = list_personas(settings.PERSONAS_DIR)
    if not keys:
        print(f"No personas found in {settings.PERSONAS_DIR}")
        return
    for key in keys:
        print(key)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = Settings()

    level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings.ensure_personas_dir()
        if args.command == "ask":
            run_ask(args, settings)
        elif args.command == "converse":
            run_converse(args, settings)
        else:
            run_personas(settings)
    except ConfigError as e:
        logger.debug("Configuration error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except AitermError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
