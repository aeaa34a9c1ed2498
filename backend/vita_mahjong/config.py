"""Application configuration settings."""
import os
import json
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

from .models.game_config import ActionKind, GameRules


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Vita Mahjong Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS settings - as comma-separated string or JSON array
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Economy overrides
    starting_coins: int = 10000
    undo_cost: int = 2000
    hint_cost: int = 2000
    shuffle_cost: int = 3000

    # Sessions idle longer than this are dropped (0 disables eviction)
    session_ttl_seconds: float = 1800.0

    # Advice collaborator
    advice_url: Optional[str] = None
    advice_api_key: Optional[str] = None
    advice_timeout: float = 10.0

    # Live commentary collaborator
    commentary_url: Optional[str] = None
    commentary_api_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from string (comma-separated or JSON)."""
        if not self.cors_origins:
            return ["http://localhost:5173"]

        # Try JSON parse first
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            pass

        # Fall back to comma-separated
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def build_game_rules(self) -> GameRules:
        """Game rules with the economy overrides applied."""
        rules = GameRules(starting_coins=self.starting_coins)
        rules.action_costs = {
            ActionKind.UNDO: self.undo_cost,
            ActionKind.HINT: self.hint_cost,
            ActionKind.SHUFFLE: self.shuffle_cost,
        }
        return rules


# Don't use lru_cache so env var updates are picked up in debug mode
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance (cached unless DEBUG is set)."""
    global _settings
    if _settings is None or os.getenv("DEBUG", "false").lower() == "true":
        _settings = Settings()
    return _settings
