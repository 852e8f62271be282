"""
Tests for environment validation and loaders.
"""

from pathlib import Path

import pytest

from svbot.core.config import (
    DEFAULT_DATA_PACK_URL,
    ConfigValidationError,
    load_data_pack_url,
    load_mappings_dir,
    load_sync_guild_id,
    validate_and_log_config,
    validate_config,
)


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("DISCORD_TOKEN", "DATA_PACK_URL", "MAPPINGS_DIR", "SYNC_GUILD_ID"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestValidation:
    def test_token_required(self, clean_env):
        result = validate_config()

        assert not result.valid
        assert result.missing_required == ["DISCORD_TOKEN"]

    def test_defaults_are_enough(self, clean_env):
        clean_env.setenv("DISCORD_TOKEN", "token")

        result = validate_config()

        assert result.valid
        assert set(result.missing_optional) == {"DATA_PACK_URL", "MAPPINGS_DIR", "SYNC_GUILD_ID"}

    def test_invalid_formats(self, clean_env):
        clean_env.setenv("DISCORD_TOKEN", "token")
        clean_env.setenv("SYNC_GUILD_ID", "my-guild")
        clean_env.setenv("DATA_PACK_URL", "ftp://example.test/pack.json")

        result = validate_config()

        assert not result.valid
        assert {name for name, _ in result.invalid_format} == {"SYNC_GUILD_ID", "DATA_PACK_URL"}

    def test_validate_and_log_raises(self, clean_env):
        with pytest.raises(ConfigValidationError):
            validate_and_log_config()


class TestLoaders:
    def test_defaults(self, clean_env):
        assert load_data_pack_url() == DEFAULT_DATA_PACK_URL
        assert load_mappings_dir() == Path("mappings")
        assert load_sync_guild_id() is None

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("DATA_PACK_URL", "https://example.test/pack.json")
        clean_env.setenv("MAPPINGS_DIR", str(tmp_path))
        clean_env.setenv("SYNC_GUILD_ID", "123456789012345678")

        assert load_data_pack_url() == "https://example.test/pack.json"
        assert load_mappings_dir() == tmp_path
        assert load_sync_guild_id() == 123456789012345678
