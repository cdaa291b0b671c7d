"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# src/prompt_charter/infrastructure/config.py -> checkout root
_CHECKOUT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_CHARTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    repo_owner: str = "mpklu"
    repo_name: str = "prompt_charter"
    branch: str = "main"
    api_base_url: str = "https://api.github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"
    user_agent: str = "prompt-charter-cli"
    domains_root: str = "domains"
    rules_filename: str = "RULES.md"
    install_dir_name: str = ".prompt-charter"
    local_root: Path | None = None
    http_timeout: float = 30.0
    log_level: str = "WARNING"

    def resolved_local_root(self) -> Path:
        """Root of the local mirror; the checkout this tool runs from by default."""
        return (self.local_root or _CHECKOUT_ROOT).resolve()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
