"""Tests para la configuración."""

from pathlib import Path

import pytest

from stepcourse import config as config_module
from stepcourse.config import Config, get_config, set_config


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


class TestConfig:
    """Tests de configuración."""

    def test_from_env(self, monkeypatch, tmp_path: Path) -> None:
        """Test variables de entorno."""
        monkeypatch.setenv("STEPCOURSE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("STEPCOURSE_CATALOG", str(tmp_path / "catalog.yaml"))
        monkeypatch.setenv("STEPCOURSE_PROFILE", "alice")
        monkeypatch.setenv("STEPCOURSE_INITIAL_MODULE", "intro")
        monkeypatch.setenv("STEPCOURSE_LOG_LEVEL", "debug")
        monkeypatch.delenv("STEPCOURSE_CONTENT_DIR", raising=False)

        config = Config.from_env()

        assert config.data_dir == tmp_path
        assert config.profiles_dir == tmp_path / "profiles"
        assert config.catalog_path == tmp_path / "catalog.yaml"
        assert config.content_dir is None
        assert config.profile == "alice"
        assert config.initial_module == "intro"
        assert config.log_level == "DEBUG"

    def test_defaults(self, monkeypatch) -> None:
        for name in (
            "STEPCOURSE_DATA_DIR",
            "STEPCOURSE_CATALOG",
            "STEPCOURSE_CONTENT_DIR",
            "STEPCOURSE_PROFILE",
            "STEPCOURSE_INITIAL_MODULE",
            "STEPCOURSE_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()

        assert config.profile == "default"
        assert config.initial_module is None
        assert config.catalog_path is None
        assert config.log_level == "WARNING"
        assert "stepcourse" in str(config.data_dir)

    def test_profile_path(self, tmp_path: Path) -> None:
        config = Config(data_dir=tmp_path, profile="bob")

        assert config.profile_path() == tmp_path / "profiles" / "bob.json"
        assert config.profile_path("../evil name") == tmp_path / "profiles" / "evil-name.json"
        assert config.profile_path("...") == tmp_path / "profiles" / "default.json"

    def test_singleton(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("STEPCOURSE_DATA_DIR", str(tmp_path))

        first = get_config()
        assert get_config() is first

        custom = Config(data_dir=tmp_path / "other")
        set_config(custom)
        assert get_config() is custom
        assert config_module._config is custom
