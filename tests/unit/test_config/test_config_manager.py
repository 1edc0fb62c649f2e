"""
Unit tests for configuration loading and caching.
"""

import pytest

from statusmon.config import (
    clear_config_cache,
    get_config,
    set_config_path,
)
from statusmon.models.config import AppConfig
from statusmon.validation import ValidationError


@pytest.mark.unit
class TestConfigManager:
    """Test cases for get_config and friends."""

    def test_loads_from_custom_path(self, config_files):
        set_config_path(config_files["config"])

        config = get_config()

        assert config.processes.limit == 3
        assert config.runner.command_timeout == 5.0

    def test_config_is_cached(self, config_files):
        set_config_path(config_files["config"])

        first = get_config()
        assert get_config() is first

        clear_config_cache()
        assert get_config() is not first

    def test_missing_file_uses_defaults(self, temp_dir):
        set_config_path(temp_dir / "absent.toml")

        assert get_config() == AppConfig()

    def test_invalid_file_raises(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[processes]\nlimit = 0\n")
        set_config_path(path)

        with pytest.raises(ValidationError):
            get_config()

    def test_malformed_toml_raises(self, temp_dir):
        import tomllib

        path = temp_dir / "config.toml"
        path.write_text("[processes\nlimit = ")
        set_config_path(path)

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_repository_config_matches_defaults(self):
        # conf/config.toml spells out every default.
        assert get_config() == AppConfig()


    def test_public_interface(self):
        import statusmon.config as config_module

        assert set(config_module.__all__) == {
            "get_config",
            "set_config_path",
            "clear_config_cache",
            "load_toml_file",
            "load_main_config",
            "validate_app_config",
        }
