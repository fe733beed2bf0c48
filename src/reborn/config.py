"""Application settings loaded from environment variables / .env file."""

import json
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str
    discord_bot_token: str = ""
    discord_guild_id: str = ""
    discord_staff_channel_id: str = ""
    # {"Hellcat": "1234…", "Zamorakian": "5678…"}
    discord_role_map_json: str = ""
    temple_base_url: str = "https://templeosrs.com/api"
    wom_base_url: str = "https://api.wiseoldman.net/v2"
    tracker_user_agent: str = "reborn-iron-ranks"
    tracker_timeout_seconds: float = 30.0
    app_env: str = "development"
    app_port: int = 8100
    app_host: str = "0.0.0.0"

    def role_map(self) -> dict[str, str]:
        """Role label → Discord role id; empty when unset or malformed."""
        if not self.discord_role_map_json:
            return {}
        try:
            data = json.loads(self.discord_role_map_json)
        except json.JSONDecodeError as exc:
            logger.warning("DISCORD_ROLE_MAP_JSON is not valid JSON: %s", exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("DISCORD_ROLE_MAP_JSON must be a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items() if v}


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
