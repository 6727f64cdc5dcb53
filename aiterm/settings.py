from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Settings(BaseSettings):
    # credentials
    GEMINI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None

    # personas
    PERSONAS_DIR: Path = Field(default=Path.home() / ".config" / "aiterm" / "personas")

    # models
    GEMINI_MODEL: str = "gemini-1.5-flash"
    OPENAI_MODEL: str = "gpt-4o-mini"

    # retrieval
    EMBED_PROVIDER: str = "gemini"  # gemini | local
    EMBED_MODEL: str = "models/text-embedding-004"
    LOCAL_EMBED_MODEL: str = "BAAI/bge-small-en-v1.5"
    CHUNK_SIZE: int = 2000
    CHUNK_OVERLAP: int = 200

    # no timeout unless asked for
    REQUEST_TIMEOUT: Optional[float] = None
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("PERSONAS_DIR")
    @classmethod
    def _expand_home(cls, v: Path) -> Path:
        return v.expanduser()

    def api_key_for(self, provider: str) -> str:
        """Return the credential for a provider or fail loudly."""
        key = {
            "gemini": self.GEMINI_API_KEY,
            "openai": self.OPENAI_API_KEY,
        }.get(provider)
        if not key:
            raise ConfigError(f"{provider.upper()}_API_KEY environment variable not set.")
        return key

    def ensure_personas_dir(self) -> Path:
        try:
            self.PERSONAS_DIR.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create personas directory {self.PERSONAS_DIR}: {e}") from e
        return self.PERSONAS_DIR
