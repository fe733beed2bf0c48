"""Unit tests for settings parsing."""

from reborn.config import Settings


def _settings(**kwargs) -> Settings:
    return Settings(database_url="postgresql+asyncpg://x/y", **kwargs)


def test_role_map_parsed():
    settings = _settings(discord_role_map_json='{"Hellcat": "123", "Zamorakian": 456}')
    assert settings.role_map() == {"Hellcat": "123", "Zamorakian": "456"}


def test_role_map_drops_empty_ids():
    assert _settings(discord_role_map_json='{"Hellcat": "", "Soul": "9"}').role_map() == {"Soul": "9"}


def test_role_map_unset():
    assert _settings(discord_role_map_json="").role_map() == {}


def test_role_map_invalid_json():
    assert _settings(discord_role_map_json="{not json").role_map() == {}


def test_role_map_must_be_object():
    assert _settings(discord_role_map_json='["Hellcat"]').role_map() == {}


def test_defaults():
    settings = _settings()
    assert settings.temple_base_url == "https://templeosrs.com/api"
    assert settings.tracker_user_agent == "reborn-iron-ranks"
