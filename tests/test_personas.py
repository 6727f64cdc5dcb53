# ===============================================
# tests/test_personas.py
# -----------------------------------------------
# Persona YAML loading, settings and agent wiring.
# ===============================================

import pytest

from aiterm.converse import create_agent, list_personas, load_persona
from aiterm.errors import ConfigError
from aiterm.generate import EchoDevClient, GeminiClient
from aiterm.search import GeminiEmbedder, LocalEmbedder
from aiterm.search.types import Persona
from aiterm.converse.agents import create_embedder
from aiterm.settings import Settings


def write(dir_, name, body):
    path = dir_ / name
    path.write_text(body, encoding="utf-8")
    return path


def test_load_persona(tmp_path):
    write(tmp_path, "critic.yaml", (
        "name: Critic\n"
        "model: gemini\n"
        "system_prompt: |\n"
        "  You find flaws.\n"
        "context_paths:\n"
        "  - ./docs\n"
        "  - notes.md\n"
    ))
    p = load_persona("critic", tmp_path)
    assert p == Persona(name="Critic", model="gemini", system_prompt="You find flaws.\n",
                        context_paths=["./docs", "notes.md"])


def test_load_persona_yml_and_defaults(tmp_path):
    write(tmp_path, "fan.yml", "name: Fan\nmodel: echo\nsystem_prompt: You love everything.\n")
    p = load_persona("fan", tmp_path)
    assert p.context_paths == []


def test_missing_persona_file(tmp_path):
    with pytest.raises(ConfigError, match="Persona file not found"):
        load_persona("ghost", tmp_path)


@pytest.mark.parametrize(
    "body",
    [
        "- just\n- a list\n",
        "name: X\nmodel: echo\n",
        "name: X\nmodel: echo\nsystem_prompt: hi\ncontext_paths: 3\n",
        "name: [unclosed\n",
    ],
)
def test_broken_persona_files(tmp_path, body):
    write(tmp_path, "bad.yaml", body)
    with pytest.raises(ConfigError):
        load_persona("bad", tmp_path)


def test_list_personas(tmp_path):
    write(tmp_path, "b.yaml", "")
    write(tmp_path, "a.yml", "")
    write(tmp_path, "notes.txt", "")
    assert list_personas(tmp_path) == ["a", "b"]
    assert list_personas(tmp_path / "missing") == []


# -------------------------
# settings
# -------------------------
def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("PERSONAS_DIR", str(tmp_path / "p"))
    monkeypatch.setenv("CHUNK_SIZE", "500")
    s = Settings(_env_file=None)
    assert s.api_key_for("gemini") == "g-key"
    assert s.CHUNK_SIZE == 500
    assert s.ensure_personas_dir().is_dir()


def test_missing_key_is_config_error(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        Settings(_env_file=None).api_key_for("openai")


# -------------------------
# agent wiring
# -------------------------
def test_create_agent_without_context(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    s = Settings(_env_file=None)
    agent = create_agent(Persona("Echo", "echo", "Repeat."), s)
    assert isinstance(agent.model, EchoDevClient)
    assert agent.store is None


def test_create_agent_gemini_requires_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ConfigError):
        create_agent(Persona("G", "gemini", "x"), Settings(_env_file=None))


def test_create_agent_builds_store(monkeypatch, docs_dir, embedder):
    monkeypatch.setattr("aiterm.converse.agents.create_embedder", lambda settings: embedder)
    s = Settings(_env_file=None, GEMINI_API_KEY="k", GEMINI_MODEL="gemini-2.0-flash")
    agent = create_agent(Persona("G", "gemini", "x", [str(docs_dir)]), s)
    assert isinstance(agent.model, GeminiClient)
    assert agent.model.model == "gemini-2.0-flash"
    assert len(agent.store) == 3


def test_create_embedder_by_provider():
    s = Settings(_env_file=None, GEMINI_API_KEY="k", EMBED_MODEL="text-embedding-004")
    emb = create_embedder(s)
    assert isinstance(emb, GeminiEmbedder)
    assert emb.model == "models/text-embedding-004"
    assert isinstance(create_embedder(Settings(_env_file=None, EMBED_PROVIDER="local")), LocalEmbedder)
    with pytest.raises(ConfigError):
        create_embedder(Settings(_env_file=None, EMBED_PROVIDER="faiss"))


def test_personas_dir_expands_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PERSONAS_DIR", "~/personas")
    s = Settings(_env_file=None)
    assert s.PERSONAS_DIR == tmp_path / "personas"
    assert s.ensure_personas_dir().is_dir()
