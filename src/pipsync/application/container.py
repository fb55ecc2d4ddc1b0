"""
Dependency injection container for the application.

This module provides a centralized way to create and manage application dependencies.
Everything is built lazily on first access and cached for the container's lifetime.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..domain.config import SyncConfig
from ..domain.models import Package, PackageInstallation
from ..domain.registry import PluginRegistry
from ..domain.validation import FormValidator
from ..infrastructure.config.manager import ConfigManager
from ..infrastructure.sqlite.store import InstallationStore
from ..infrastructure.xml import XmlDocument
from .plugins.pip_plugin import PipInstallationPlugin, default_registry
from .reconciler.multi import MultiDocumentReconciler
from .reconciler.operations import ElementOperations
from .reconciler.single import SingleDocumentReconciler
from .sync_service import SyncService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Manages the creation and lifecycle of application services and infrastructure components.
    """

    def __init__(self, config_dir: Optional[Path] = None, config: Optional[SyncConfig] = None):
        """
        Initialize the container.

        Args:
            config_dir: Base directory for configuration files
            config: In-memory configuration overriding the config file
        """
        self.config_dir = config_dir or Path.cwd() / "config"

        self._config_manager: Optional[ConfigManager] = None
        self._store: Optional[InstallationStore] = None
        self._package: Optional[Package] = None
        self._registry: Optional[PluginRegistry] = None
        self._documents: Optional[List[XmlDocument]] = None
        self._pip_plugin: Optional[PipInstallationPlugin] = None
        self._reconciler = None
        self._form_validator: Optional[FormValidator] = None
        self._sync_service: Optional[SyncService] = None

        if config is not None:
            self.config_manager.set_sync_config(config)

    @property
    def config_manager(self) -> ConfigManager:
        """Get the configuration manager."""
        if self._config_manager is None:
            self._config_manager = ConfigManager(self.config_dir)
        return self._config_manager

    @property
    def sync_config(self) -> SyncConfig:
        return self.config_manager.load_sync_config()

    @property
    def store(self) -> InstallationStore:
        """Get the installation store, with its schema initialized."""
        if self._store is None:
            self._store = InstallationStore(self.config_manager.get_database_path())
            self._store.initialize_schema()
        return self._store

    @property
    def package(self) -> Package:
        """The configured package, registered in the store."""
        if self._package is None:
            self._package = self.store.register_package(self.sync_config.package.to_package())
        return self._package

    @property
    def registry(self) -> PluginRegistry:
        if self._registry is None:
            self._registry = default_registry()
        return self._registry

    @property
    def documents(self) -> List[XmlDocument]:
        """Managed PIP documents; missing files start out empty."""
        if self._documents is None:
            indent = self.sync_config.indent
            self._documents = [
                XmlDocument.load_or_create(path, indent=indent)
                for path in self.config_manager.get_pip_paths()
            ]
            logger.debug("Loaded %d PIP document(s)", len(self._documents))
        return self._documents

    @property
    def pip_plugin(self) -> PipInstallationPlugin:
        if self._pip_plugin is None:
            self._pip_plugin = PipInstallationPlugin(self.store, PackageInstallation(self.package))
        return self._pip_plugin

    @property
    def reconciler(self):
        """Single-document reconciler for one PIP file, multi-document otherwise."""
        if self._reconciler is None:
            operations = ElementOperations(self.pip_plugin)
            documents = self.documents
            if len(documents) == 1:
                self._reconciler = SingleDocumentReconciler(operations, documents[0])
            else:
                self._reconciler = MultiDocumentReconciler(operations, documents)
        return self._reconciler

    @property
    def form_validator(self) -> FormValidator:
        if self._form_validator is None:
            self._form_validator = self.pip_plugin.build_form_validator(self.registry)
        return self._form_validator

    @property
    def sync_service(self) -> SyncService:
        if self._sync_service is None:
            self._sync_service = SyncService(
                plugin=self.pip_plugin,
                reconciler=self.reconciler,
                documents=self.documents,
                validator=self.form_validator,
            )
        return self._sync_service

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
