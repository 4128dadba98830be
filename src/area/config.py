from __future__ import annotations

from pathlib import Path
from functools import lru_cache

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


ROOT_DIR = Path(__file__).resolve().parent.parent.parent

# In Docker, the package is installed to site-packages but config lives at /app/config.
# Fall back to the source-tree-relative path for local development.
_docker_config = Path("/app/config")
CONFIG_DIR = _docker_config if _docker_config.exists() else ROOT_DIR / "config"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Webhook auth
    webhook_secret: str = ""
    github_webhook_secret: str = ""

    # Database
    database_url: str = "sqlite+aiosqlite:///data/area.db"

    # Dispatch
    reaction_timeout_seconds: float = 30.0
    max_concurrent_reactions: int = 4

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def load_yaml_config(self) -> dict:
        return _read_yaml(CONFIG_DIR / "settings.yaml")

    def provider_base_url(self, provider: str, default: str) -> str:
        providers = self.load_yaml_config().get("providers", {}) or {}
        return (providers.get(provider) or {}).get("api_base_url") or default


@lru_cache
def _read_yaml(path: Path) -> dict:
    # Parsed once per path for the life of the process
    if path.exists():
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return {}


@lru_cache
def get_settings() -> Settings:
    return Settings()
