"""
Configuration repository for loading and saving config files.

This module provides the infrastructure layer for configuration persistence.
It handles file I/O operations and basic validation.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from pipsync.domain.config import SyncConfig

logger = logging.getLogger(__name__)

SYNC_CONFIG_NAME = "sync_config"


def _strip_comments(jsonc_content: str) -> str:
    """Drop full-line // comments from JSONC content."""
    lines = [line for line in jsonc_content.splitlines() if not line.lstrip().startswith("//")]
    return "\n".join(lines)


class ConfigRepository:
    """
    Repository for configuration file operations.

    Handles loading and saving of configuration files with support for
    JSON and JSONC formats.
    """

    def __init__(self, config_dir: Path):
        """
        Initialize the config repository.

        Args:
            config_dir: Base directory for configuration files
        """
        self.config_dir = Path(config_dir)

    def load_json_file(self, filename: str) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Args:
            filename: Name of the file to load (without extension)

        Returns:
            Parsed JSON data as dictionary

        Raises:
            FileNotFoundError: If neither file exists
            ValueError: If the file cannot be parsed
        """
        json_path = self.config_dir / f"{filename}.json"
        jsonc_path = self.config_dir / f"{filename}.jsonc"

        if json_path.exists():
            try:
                with open(json_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {json_path}: {e}") from e

        if jsonc_path.exists():
            try:
                with open(jsonc_path, 'r', encoding='utf-8') as f:
                    return json.loads(_strip_comments(f.read()))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSONC in {jsonc_path}: {e}") from e

        raise FileNotFoundError(
            f"Config file '{filename}.json' or '{filename}.jsonc' not found in {self.config_dir}"
        )

    def save_json_file(self, filename: str, data: Dict[str, Any]) -> Path:
        """Save data to `<filename>.json`, creating the config directory if needed."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.config_dir / f"{filename}.json"
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(json.dumps(data, indent=2, ensure_ascii=False))

        logger.info("Saved config file: %s", filepath)
        return filepath

    def load_sync_config(self) -> SyncConfig:
        """
        Load the sync configuration.

        Raises:
            FileNotFoundError: If the config file does not exist
            ValueError: If config cannot be parsed or validated
        """
        data = self.load_json_file(SYNC_CONFIG_NAME)
        try:
            return SyncConfig(**data)
        except ValidationError as e:
            logger.error("Failed to validate sync config: %s", e)
            raise ValueError(f"Invalid sync configuration: {e}") from e

    def save_sync_config(self, config: SyncConfig) -> Path:
        return self.save_json_file(SYNC_CONFIG_NAME, config.model_dump(mode="json"))
