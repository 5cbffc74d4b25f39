"""
Tests for user configuration loading and the config subcommand.
"""

import json

import pytest
from photocatalog.__main__ import show_config
from photocatalog.config import DEFAULT_DB_FILENAME
from photocatalog.user_config import UserConfig, get_user_config


def write_config(config, data):
    config.config_dir.mkdir(parents=True, exist_ok=True)
    config.config_file_path.write_text(json.dumps(data), encoding='utf-8')
    config.reload()


class TestUserConfig:
    """Test UserConfig priorities and parsing."""

    def test_singleton(self):
        assert UserConfig() is get_user_config()

    def test_config_dir_from_environment(self, isolated_config, temp_dir):
        assert isolated_config.config_file_path == temp_dir / "config" / "config.json"

    def test_defaults(self, isolated_config):
        assert isolated_config.db_file == DEFAULT_DB_FILENAME
        assert isolated_config.recursive_scan is False
        assert isolated_config.prefer_exif_timestamp is True
        assert isolated_config.show_progress is True

    def test_values_from_file(self, isolated_config):
        write_config(isolated_config, {
            "db_file": "~/Pictures/photo_db.json",
            "recursive_scan": True,
            "prefer_exif_timestamp": False,
        })
        assert isolated_config.db_file == "~/Pictures/photo_db.json"
        assert isolated_config.recursive_scan is True
        assert isolated_config.prefer_exif_timestamp is False
        assert isolated_config.show_progress is True

    def test_environment_overrides_file(self, isolated_config, monkeypatch):
        write_config(isolated_config, {"recursive_scan": False, "db_file": "from_file.json"})
        monkeypatch.setenv('PHOTOCATALOG_RECURSIVE', 'true')
        monkeypatch.setenv('PHOTOCATALOG_DB_FILE', '/data/from_env.json')
        assert isolated_config.recursive_scan is True
        assert isolated_config.db_file == '/data/from_env.json'

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("0", False), ("yes", True), ("No", False),
        ("on", True), ("off", False), ("false", False),
    ])
    def test_boolean_environment_values(self, isolated_config, monkeypatch, value, expected):
        monkeypatch.setenv('PHOTOCATALOG_SHOW_PROGRESS', value)
        assert isolated_config.show_progress is expected

    def test_invalid_boolean_uses_default(self, isolated_config, monkeypatch):
        monkeypatch.setenv('PHOTOCATALOG_EXIF_TIMESTAMP', 'sometimes')
        assert isolated_config.prefer_exif_timestamp is True

    def test_invalid_file_ignored(self, isolated_config):
        isolated_config.config_dir.mkdir(parents=True)
        isolated_config.config_file_path.write_text("{broken", encoding='utf-8')
        isolated_config.reload()
        assert isolated_config.db_file == DEFAULT_DB_FILENAME

    def test_non_object_file_ignored(self, isolated_config):
        write_config(isolated_config, ["db_file"])
        assert isolated_config.get('db_file', default='x') == 'x'

    def test_create_example_config(self, isolated_config):
        assert isolated_config.create_example_config() is True
        data = json.loads(isolated_config.config_file_path.read_text(encoding='utf-8'))
        assert data['recursive_scan'] is False
        assert isolated_config.db_file == DEFAULT_DB_FILENAME


class TestShowConfig:
    """Test the config subcommand."""

    def test_show(self, isolated_config, capsys):
        assert show_config() == 0
        out = capsys.readouterr().out
        assert "Not found" in out
        assert f"db_file: {DEFAULT_DB_FILENAME}" in out

    def test_init(self, isolated_config, capsys):
        assert show_config(init=True) == 0
        assert isolated_config.config_file_path.exists()
        assert "Created example configuration file" in capsys.readouterr().out
