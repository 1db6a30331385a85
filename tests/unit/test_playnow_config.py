"""
Unit tests for PlayNowConfig defaults and loading.
"""
import json

import pytest
from pydantic import ValidationError

from error_handling import ConfigurationError
from playnow_config import LauncherConfig, PlayNowConfig


class TestDefaults:

    def test_default_values(self):
        config = PlayNowConfig()

        assert config.playground.default_directory is None
        assert config.playground.target_platform == "osx"
        assert config.playground.contents_swift_string == 'var str = "Hello, playground"'
        assert config.playground.make_used_if_from_services is True
        assert config.naming.playground_name_prefix == "PlayNow-"
        assert config.naming.playground_name_date_format == "%Y%m%d"
        assert config.naming.page_name_prefix == ""
        assert config.naming.page_name_date_format == "%H%M%S"
        assert config.launcher.wait_seconds_before_opening_page == 3
        assert config.launcher.editor_application is None
        assert config.invocation.default_delay == 1.0

    def test_wait_seconds_has_a_floor(self):
        assert LauncherConfig(wait_seconds_before_opening_page=0).wait_seconds_before_opening_page == 3
        assert LauncherConfig(wait_seconds_before_opening_page=10).wait_seconds_before_opening_page == 10

    def test_config_is_immutable(self):
        config = PlayNowConfig()

        with pytest.raises(ValidationError):
            config.playground.target_platform = "ios"


class TestLoading:

    def test_from_file(self, tmp_path):
        path = tmp_path / "playnow.json"
        path.write_text(json.dumps({
            "playground": {"default_directory": str(tmp_path), "target_platform": "ios"},
            "naming": {"page_name_prefix": "Page-"},
            "launcher": {"editor_application": "/Applications/Xcode-beta.app"},
        }), encoding="utf-8")

        config = PlayNowConfig.from_file(path)

        assert config.playground.default_directory == tmp_path
        assert config.playground.target_platform == "ios"
        assert config.naming.page_name_prefix == "Page-"
        assert config.launcher.editor_application == "/Applications/Xcode-beta.app"

    def test_empty_file_means_defaults(self, tmp_path):
        path = tmp_path / "playnow.json"
        path.write_text("", encoding="utf-8")

        assert PlayNowConfig.from_file(path) == PlayNowConfig()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "playnow.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            PlayNowConfig.from_file(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "playnow.json"
        path.write_text(json.dumps({"launcher": {"launch_timeout": -1}}), encoding="utf-8")

        with pytest.raises(ConfigurationError):
            PlayNowConfig.from_file(path)

    def test_load_uses_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"playground": {"target_platform": "tvos"}}), encoding="utf-8")
        monkeypatch.setenv("PLAYNOW_CONFIG", str(path))

        assert PlayNowConfig.load().playground.target_platform == "tvos"

    def test_load_without_any_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PLAYNOW_CONFIG", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert PlayNowConfig.load() == PlayNowConfig()

    def test_load_reads_home_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PLAYNOW_CONFIG", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".playnow.json").write_text(
            json.dumps({"naming": {"playground_name_prefix": "Home-"}}), encoding="utf-8"
        )

        assert PlayNowConfig.load().naming.playground_name_prefix == "Home-"

    def test_explicit_missing_file_is_an_error(self, tmp_path):
        with pytest.raises(OSError):
            PlayNowConfig.load(tmp_path / "missing.json")
