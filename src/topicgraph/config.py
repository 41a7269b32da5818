"""
topicgraph configuration

Settings are read from environment variables prefixed with TOPICGRAPH_ and
from an optional .env file in the working directory:

- TOPICGRAPH_MANIFEST_PATH: manifest JSON (default: data/manifest.json in the project)
- TOPICGRAPH_DOCS_ROOT: directory topic files are resolved against
  (default: the manifest's directory)
- TOPICGRAPH_LOG_LEVEL: root log level used by the CLI (default: WARNING)
"""

from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_MANIFEST_PATH = PROJECT_ROOT / "data" / "manifest.json"


class Settings(BaseSettings):
    """Runtime configuration for loading the topic manifest."""

    manifest_path: Path = DEFAULT_MANIFEST_PATH
    docs_root: Optional[Path] = None
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="TOPICGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("manifest_path", "docs_root", mode="before")
    @classmethod
    def _normalize_path(cls, value: str | Path | None) -> Optional[Path]:
        if value is None or value == "":
            return None
        return Path(value).expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    def get_docs_root(self) -> Path:
        """Directory that topic ``file`` entries are relative to."""
        return self.docs_root or self.manifest_path.parent


@lru_cache(maxsize=1)
def get_config() -> Settings:
    """Load and cache configuration."""
    return Settings()


def reload_config() -> Settings:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["Settings", "get_config", "reload_config", "PROJECT_ROOT", "DEFAULT_MANIFEST_PATH"]
