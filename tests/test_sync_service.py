"""
End-to-end tests of the sync service and the CLI.

A temporary project directory holds the config, the PIP files and the
database; everything is wired through the application container.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from conftest import PLAIN_PIP_XML, entry_names, write_pip_file
from pipsync.application.container import Container
from pipsync.application.plugins.pip_plugin import PIP_PLUGIN_CLASS_NAME
from pipsync.application.reconciler.multi import MultiDocumentReconciler
from pipsync.application.reconciler.single import SingleDocumentReconciler
from pipsync.domain.config import SyncConfig
from pipsync.domain.errors import FormValidationError, UnknownIdentifierError
from pipsync.infrastructure.xml import XmlDocument
from pipsync.interface.cli import app


def make_config(tmp_path, **overrides):
    data = {
        "database_path": str(tmp_path / "output" / "installation.db"),
        "project_dir": str(tmp_path / "project"),
        "package": {"identifier": "com.example.forum", "name": "Forum"},
    }
    data.update(overrides)
    return SyncConfig(**data)


@pytest.fixture
def container(tmp_path):
    container = Container(config_dir=tmp_path / "config", config=make_config(tmp_path))
    yield container
    container.close()


@pytest.fixture
def pip_path(tmp_path):
    return tmp_path / "project" / "packageInstallationPlugin.xml"


class TestContainer:

    def test_single_file_uses_single_reconciler(self, container):
        assert isinstance(container.reconciler, SingleDocumentReconciler)

    def test_several_files_use_multi_reconciler(self, tmp_path):
        config = make_config(tmp_path, pip_files=["a.xml", "b.xml"])
        container = Container(config_dir=tmp_path / "config", config=config)
        try:
            assert isinstance(container.reconciler, MultiDocumentReconciler)
            assert [d.path.name for d in container.documents] == ["a.xml", "b.xml"]
        finally:
            container.close()

    def test_package_is_registered(self, container):
        assert container.package.id is not None
        assert container.store.get_package(container.package.id).package == "com.example.forum"


class TestSyncService:

    def test_add_list_and_show(self, container, pip_path):
        service = container.sync_service
        service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME, "extra": "ignored"})

        assert [entry.identifier for entry in service.list_entries()] == ["fooBar"]
        assert service.show_entry("fooBar")["className"] == PIP_PLUGIN_CLASS_NAME
        assert entry_names(XmlDocument.load(pip_path)) == ["fooBar"]
        assert [row.plugin_name for row in service.installed_plugins()] == ["fooBar"]

    def test_add_rejects_invalid_input(self, container, pip_path):
        with pytest.raises(FormValidationError) as exc_info:
            container.sync_service.add_entry({"pluginName": "Foo1", "className": "\\Vendor\\Foo"})

        assert set(exc_info.value.errors) == {"pluginName", "className"}
        assert not pip_path.exists()

    def test_add_rejects_duplicate_name(self, container):
        service = container.sync_service
        service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME})

        with pytest.raises(FormValidationError) as exc_info:
            service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME})
        assert exc_info.value.errors["pluginName"][0].type == "notUnique"

    def test_edit_keeps_unchanged_fields(self, container):
        service = container.sync_service
        service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME})

        result = service.edit_entry("fooBar", {"pluginName": "bazQux", "className": None})

        assert result.identifier == "bazQux"
        assert service.show_entry("bazQux")["className"] == PIP_PLUGIN_CLASS_NAME
        assert [row.plugin_name for row in service.installed_plugins()] == ["bazQux"]

    def test_rejected_edit_clears_edited_entry(self, container):
        service = container.sync_service
        service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME})

        with pytest.raises(FormValidationError):
            service.edit_entry("fooBar", {"pluginName": "Bad1"})

        assert container.reconciler.edited_entry is None
        assert service.show_entry("fooBar")["pluginName"] == "fooBar"

    def test_edit_unknown(self, container):
        with pytest.raises(UnknownIdentifierError):
            container.sync_service.edit_entry("nope", {"className": PIP_PLUGIN_CLASS_NAME})

    def test_show_unknown(self, container):
        with pytest.raises(UnknownIdentifierError):
            container.sync_service.show_entry("nope")

    def test_delete(self, container, pip_path):
        service = container.sync_service
        service.add_entry({"pluginName": "fooBar", "className": PIP_PLUGIN_CLASS_NAME})
        service.delete_entry("fooBar", add_delete_instruction=True)

        document = XmlDocument.load(pip_path)
        assert entry_names(document) == []
        assert entry_names(document, "delete") == ["fooBar"]
        assert service.installed_plugins() == []

    def test_install_and_uninstall(self, tmp_path, pip_path):
        write_pip_file(pip_path, PLAIN_PIP_XML)
        container = Container(config_dir=tmp_path / "config", config=make_config(tmp_path))
        try:
            service = container.sync_service
            assert service.install() == 2
            assert service.install() == 2

            service.uninstall()
            assert service.installed_plugins() == []
        finally:
            container.close()

    def test_sort_documents(self, tmp_path, pip_path):
        write_pip_file(pip_path, PLAIN_PIP_XML)
        container = Container(config_dir=tmp_path / "config", config=make_config(tmp_path))
        try:
            assert container.sync_service.sort_documents() == [pip_path]
            assert entry_names(XmlDocument.load(pip_path)) == ["bar", "foo"]
        finally:
            container.close()


class TestCli:

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        yield
        logging.getLogger().handlers.clear()

    @pytest.fixture
    def config_dir(self, tmp_path):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "sync_config.json").write_text(
            json.dumps(make_config(tmp_path).model_dump(mode="json"))
        )
        return config_dir

    def invoke(self, config_dir, *args):
        return CliRunner().invoke(app, ["--config-dir", str(config_dir), *args])

    def test_add_and_list(self, config_dir):
        result = self.invoke(config_dir, "add", "fooBar", PIP_PLUGIN_CLASS_NAME)
        assert result.exit_code == 0, result.output

        result = self.invoke(config_dir, "list")
        assert result.exit_code == 0, result.output
        assert "fooBar" in result.output

    def test_add_invalid(self, config_dir):
        result = self.invoke(config_dir, "add", "Foo1", PIP_PLUGIN_CLASS_NAME)

        assert result.exit_code == 1
        assert "Validation failed" in result.output

    def test_delete_unknown(self, config_dir):
        result = self.invoke(config_dir, "delete", "nope")

        assert result.exit_code == 1
        assert "nope" in result.output

    def test_install_and_plugins(self, config_dir, pip_path):
        write_pip_file(pip_path, PLAIN_PIP_XML)

        result = self.invoke(config_dir, "install")
        assert result.exit_code == 0, result.output
        assert "2 plugin(s) installed" in result.output

        result = self.invoke(config_dir, "plugins")
        assert "foo" in result.output
        assert "PipInstallationPlugin" in result.output

    def test_missing_config(self, tmp_path):
        result = self.invoke(tmp_path / "nowhere", "list")

        assert result.exit_code == 1
