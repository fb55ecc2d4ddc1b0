"""
Configuration manager.

Caches the loaded sync configuration and resolves the paths it names.
"""

import logging
from pathlib import Path
from typing import List, Optional

from pipsync.domain.config import SyncConfig
from pipsync.infrastructure.config.repository import ConfigRepository

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Loads the sync configuration once and answers path questions about it.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the config manager.

        Args:
            config_dir: Base directory for configuration files.
                       Defaults to 'config' subdirectory of current working directory.
        """
        if config_dir is None:
            config_dir = Path.cwd() / "config"

        self.config_dir = Path(config_dir)
        self.repository = ConfigRepository(self.config_dir)
        self._sync_config: Optional[SyncConfig] = None

    def load_sync_config(self, force_reload: bool = False) -> SyncConfig:
        if self._sync_config is None or force_reload:
            logger.info("Loading sync configuration from %s", self.config_dir)
            self._sync_config = self.repository.load_sync_config()
            logger.info("Loaded sync config for package: %s", self._sync_config.package.identifier)

        return self._sync_config

    def set_sync_config(self, config: SyncConfig) -> None:
        """Use an in-memory configuration instead of the config file."""
        self._sync_config = config

    def get_pip_paths(self) -> List[Path]:
        config = self.load_sync_config()
        project_dir = Path(config.project_dir)
        return [project_dir / name for name in config.pip_files]

    def get_database_path(self) -> Path:
        return Path(self.load_sync_config().database_path)
