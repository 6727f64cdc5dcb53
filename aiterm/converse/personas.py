# Persona files: <personas_dir>/<key>.yaml with name, model, system_prompt
# and an optional context_paths list.

from __future__ import annotations

from pathlib import Path
from typing import List

import yaml

from ..errors import ConfigError
from ..search.types import Persona

PERSONA_EXTS = (".yaml", ".yml")
REQUIRED_KEYS = ("name", "model", "system_prompt")


def _persona_file(key: str, personas_dir: Path) -> Path:
    for ext in PERSONA_EXTS:
        path = personas_dir / f"{key}{ext}"
        if path.exists():
            return path
    raise ConfigError(f"Persona file not found: {personas_dir / (key + PERSONA_EXTS[0])}")


def load_persona(key: str, personas_dir: Path) -> Persona:
    """Load and validate one persona by key."""
    path = _persona_file(key, Path(personas_dir))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse persona file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Persona file {path} must contain a mapping")
    missing = [k for k in REQUIRED_KEYS if not data.get(k)]
    if missing:
        raise ConfigError(f"Persona file {path} is missing: {', '.join(missing)}")

    context_paths = data.get("context_paths") or []
    if isinstance(context_paths, str):
        context_paths = [context_paths]
    if not isinstance(context_paths, list):
        raise ConfigError(f"context_paths in {path} must be a list of paths")

    return Persona(
        name=str(data["name"]),
        model=str(data["model"]),
        system_prompt=str(data["system_prompt"]),
        context_paths=[str(p) for p in context_paths],
    )


def list_personas(personas_dir: Path) -> List[str]:
    personas_dir = Path(personas_dir)
    if not personas_dir.is_dir():
        return []
    return sorted({p.stem for p in personas_dir.iterdir() if p.suffix in PERSONA_EXTS and p.is_file()})
