"""
Tests for the config infrastructure layer.

This module tests the repository and manager components.
"""

import json
import shutil
import tempfile
from pathlib import Path

import pytest

from pipsync.domain.config import PackageConfig, SyncConfig
from pipsync.infrastructure.config.manager import ConfigManager
from pipsync.infrastructure.config.repository import ConfigRepository


def sample_config_data():
    return {
        "database_path": "output/test.db",
        "project_dir": "project",
        "pip_files": ["packageInstallationPlugin.xml", "extra/pips.xml"],
        "package": {"identifier": "com.example.forum", "name": "Forum"},
        "log_level": "debug",
    }


class TestConfigRepository:
    """Test cases for ConfigRepository."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo = ConfigRepository(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_load_json_file_success(self):
        """Test successful JSON file loading."""
        test_data = {"key": "value", "number": 42}
        (self.temp_dir / "test.json").write_text(json.dumps(test_data))

        assert self.repo.load_json_file("test") == test_data

    def test_load_jsonc_file_with_comments(self):
        """Full-line comments are stripped from JSONC files."""
        content = '// package settings\n{\n  // the key\n  "key": "value"\n}\n'
        (self.temp_dir / "test.jsonc").write_text(content)

        assert self.repo.load_json_file("test") == {"key": "value"}

    def test_load_json_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            self.repo.load_json_file("nonexistent")

    def test_load_json_file_invalid(self):
        (self.temp_dir / "broken.json").write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            self.repo.load_json_file("broken")

    def test_save_json_file(self):
        test_data = {"key": "value", "number": 42}
        path = self.repo.save_json_file("test", test_data)

        assert path == self.temp_dir / "test.json"
        assert json.loads(path.read_text()) == test_data

    def test_load_sync_config(self):
        (self.temp_dir / "sync_config.json").write_text(json.dumps(sample_config_data()))

        config = self.repo.load_sync_config()

        assert isinstance(config, SyncConfig)
        assert config.package.identifier == "com.example.forum"
        assert config.log_level == "DEBUG"
        assert config.indent == "\t"

    def test_load_sync_config_invalid(self):
        data = sample_config_data()
        data["log_level"] = "chatty"
        (self.temp_dir / "sync_config.json").write_text(json.dumps(data))

        with pytest.raises(ValueError, match="Invalid sync configuration"):
            self.repo.load_sync_config()

    def test_save_and_reload_sync_config(self):
        config = SyncConfig(**sample_config_data())
        self.repo.save_sync_config(config)

        assert self.repo.load_sync_config() == config


class TestSyncConfig:
    """Validation rules of the sync configuration model."""

    def test_defaults(self):
        config = SyncConfig(package={"identifier": "com.example.forum"})

        assert config.pip_files == ["packageInstallationPlugin.xml"]
        assert config.database_path == "output/installation.db"
        assert config.log_file is None

    def test_package_is_required(self):
        with pytest.raises(ValueError):
            SyncConfig()

    def test_empty_pip_files_rejected(self):
        with pytest.raises(ValueError, match="At least one PIP file"):
            SyncConfig(package={"identifier": "com.example.forum"}, pip_files=[])

    def test_duplicate_pip_files_rejected(self):
        with pytest.raises(ValueError, match="unique"):
            SyncConfig(package={"identifier": "com.example.forum"}, pip_files=["a.xml", "a.xml"])

    def test_package_identifier_without_spaces(self):
        with pytest.raises(ValueError):
            PackageConfig(identifier="com example forum")

    def test_package_config_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            PackageConfig(identifier="com.example.forum", version="1.0")

    def test_to_package(self):
        package = PackageConfig(identifier="com.woltlab.wcf", package_id=1).to_package()

        assert package.id == 1
        assert package.package_name == "com.woltlab.wcf"
        assert package.is_core


class TestConfigManager:
    """Test cases for ConfigManager."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        (self.temp_dir / "sync_config.json").write_text(json.dumps(sample_config_data()))
        self.manager = ConfigManager(self.temp_dir)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir)

    def test_load_is_cached(self):
        first = self.manager.load_sync_config()
        (self.temp_dir / "sync_config.json").unlink()

        assert self.manager.load_sync_config() is first

    def test_force_reload(self):
        self.manager.load_sync_config()
        data = sample_config_data()
        data["project_dir"] = "elsewhere"
        (self.temp_dir / "sync_config.json").write_text(json.dumps(data))

        assert self.manager.load_sync_config(force_reload=True).project_dir == "elsewhere"

    def test_get_pip_paths(self):
        assert self.manager.get_pip_paths() == [
            Path("project") / "packageInstallationPlugin.xml",
            Path("project") / "extra/pips.xml",
        ]

    def test_get_database_path(self):
        assert self.manager.get_database_path() == Path("output/test.db")

    def test_set_sync_config_overrides_file(self):
        config = SyncConfig(package={"identifier": "com.example.other"})
        self.manager.set_sync_config(config)

        assert self.manager.load_sync_config().package.identifier == "com.example.other"
