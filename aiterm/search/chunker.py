# Document discovery + fixed-size overlapping chunking.
# Sizes are counted in code points, so slicing never splits a character.

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Iterator, List

from .types import Chunk

logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 2000
CHUNK_OVERLAP = 200

TEXT_EXTS = {
    ".rs", ".toml", ".md", ".txt", ".json", ".yaml", ".yml", ".html", ".css",
    ".js", ".ts", ".py", ".go", ".c", ".cpp", ".h", ".hpp", ".php", ".sh", ".sql",
}


def is_text_file(p: Path) -> bool:
    return p.suffix.lower() in TEXT_EXTS


def chunk_text(source: str, text: str, max_size: int, overlap: int) -> List[Chunk]:
    """
    Split `text` into windows of `max_size` characters, each starting
    `max_size - overlap` after the previous one. The last window ends exactly
    at the end of the text.
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")
    if overlap < 0 or overlap >= max_size:
        raise ValueError(f"overlap must be in [0, max_size), got overlap={overlap} max_size={max_size}")

    n = len(text)
    if n <= max_size:
        return [Chunk(source=source, text=text)]

    chunks: List[Chunk] = []
    step = max_size - overlap
    start = 0
    while start < n:
        end = min(start + max_size, n)
        chunks.append(Chunk(source=source, text=text[start:end]))
        if end == n:
            break
        start += step
    return chunks


def discover_files(paths: Iterable[str]) -> Iterator[Path]:
    """Yield text-like files under each path (a file or a directory tree)."""
    for raw in paths:
        p = Path(raw).expanduser()
        if p.is_dir():
            for f in sorted(p.rglob("*")):
                if f.is_file() and is_text_file(f):
                    yield f
        elif p.is_file():
            if is_text_file(p):
                yield p
        else:
            logger.warning("Context path does not exist: %s", p)


def load_and_chunk(
    paths: Iterable[str],
    max_size: int = MAX_CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> List[Chunk]:
    chunks: List[Chunk] = []
    for f in discover_files(paths):
        try:
            content = f.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", f, e)
            continue
        if not content.strip():
            logger.debug("Skipping empty file %s", f)
            continue
        chunks.extend(chunk_text(str(f), content, max_size, overlap))
    return chunks
