"""
Tests for the package installation plugin and the installation store.
"""

import sqlite3

import pytest

from conftest import write_pip_file
from pipsync.application.plugins.pip_plugin import PipInstallationPlugin
from pipsync.domain.models import CORE_PACKAGE, ElementData, Package, PackageInstallation
from pipsync.infrastructure.xml import XmlDocument

INSTALL_XML = r"""<?xml version="1.0" encoding="UTF-8"?>
<data>
	<import>
		<pip name="alpha">vendor\plugin\AlphaPlugin</pip>
		<pip name="mu">vendor\plugin\MuPlugin</pip>
	</import>
	<delete>
		<pip name="retired"/>
	</delete>
</data>
"""


def plugin_names(store, package_id):
    return [row.plugin_name for row in store.list_plugins(package_id)]


class TestPrepareImport:

    def test_regular_package_priority(self, plugin):
        row = plugin.prepare_import(ElementData(attributes={"name": "foo"}, node_value="vendor\\Foo"))

        assert row == {"className": "vendor\\Foo", "pluginName": "foo", "priority": 0}

    def test_core_package_priority(self, store):
        core = store.register_package(Package(package=CORE_PACKAGE, package_name="Core"))
        plugin = PipInstallationPlugin(store, PackageInstallation(core))

        assert plugin.prepare_import(ElementData(attributes={"name": "foo"}, node_value="X"))["priority"] == 1

    def test_validate_import_rejects_missing_name(self, plugin):
        with pytest.raises(ValueError, match="without a name"):
            plugin.validate_import({"pluginName": "", "className": "X", "priority": 0})

    def test_unregistered_package(self, store):
        plugin = PipInstallationPlugin(store, PackageInstallation(Package(package="com.example.new")))

        with pytest.raises(ValueError, match="not registered"):
            plugin.find_existing_item({"pluginName": "foo"})

    def test_default_filename(self):
        assert PipInstallationPlugin.get_default_filename() == "packageInstallationPlugin.xml"


class TestInstall:

    @pytest.fixture
    def install_document(self, tmp_path):
        return XmlDocument.load(write_pip_file(tmp_path / "pip.xml", INSTALL_XML))

    def test_install_imports_and_deletes(self, plugin, store, package, install_document):
        store.insert("package_installation_plugin", {
            "pluginName": "retired", "className": "vendor\\Old", "priority": 0, "packageID": package.id,
        })

        plugin.install(install_document)

        assert plugin_names(store, package.id) == ["alpha", "mu"]

    def test_install_is_idempotent(self, plugin, store, package, install_document):
        plugin.install(install_document)
        plugin.install(install_document)

        assert plugin_names(store, package.id) == ["alpha", "mu"]

    def test_reinstall_updates_class_name(self, plugin, store, package, install_document):
        plugin.install(install_document)
        install_document.entries("import", "pip")[0].text = "vendor\\plugin\\NewAlpha"
        plugin.install(install_document)

        assert store.get_plugin("alpha", package.id).class_name == "vendor\\plugin\\NewAlpha"

    def test_invalid_entry_rolls_back(self, plugin, store, package, tmp_path):
        document = XmlDocument.load(write_pip_file(
            tmp_path / "bad.xml",
            '<data><import><pip name="alpha">A</pip><pip name="broken"/></import></data>',
        ))

        with pytest.raises(ValueError):
            plugin.install(document)
        assert plugin_names(store, package.id) == []

    def test_handle_delete_is_scoped_to_package(self, plugin, store, package):
        other = store.register_package(Package(package="com.example.other"))
        for package_id in (package.id, other.id):
            store.insert("package_installation_plugin", {
                "pluginName": "shared", "className": "X", "priority": 0, "packageID": package_id,
            })

        plugin.handle_delete([ElementData(attributes={"name": "shared"})])

        assert plugin_names(store, package.id) == []
        assert plugin_names(store, other.id) == ["shared"]

    def test_uninstall(self, plugin, store, package, install_document):
        other = store.register_package(Package(package="com.example.other"))
        PipInstallationPlugin(store, PackageInstallation(other)).install(install_document)
        plugin.install(install_document)

        plugin.uninstall()

        assert plugin_names(store, package.id) == []
        assert plugin_names(store, other.id) == ["alpha", "mu"]


class TestEntryHandler:

    def test_element_data(self, plugin, document):
        element = plugin.resolver.find_by_identifier(document, "alpha")
        data = plugin.element_data(element)

        assert data.attributes == {"name": "alpha"}
        assert data.node_value == "vendor\\plugin\\AlphaPlugin"

    def test_fetch_element_data_notify(self, plugin, document):
        calls = []
        plugin.listeners.append(lambda element, data: calls.append(data))
        element = plugin.resolver.find_by_identifier(document, "mu")

        plugin.fetch_element_data(element, notify=False)
        assert calls == []

        data = plugin.fetch_element_data(element)
        assert calls == [data]

    def test_entry_list_keys(self, plugin):
        assert plugin.entry_list_keys() == {"pluginName": "Plugin Name", "className": "Class Name"}

    def test_insert_element_creates_import_container(self, plugin):
        document = XmlDocument.from_string("<data/>")
        plugin.insert_element(document, document.create_element("pip", "X", {"name": "foo"}))

        assert [e.get("name") for e in document.entries("import", "pip")] == ["foo"]

    def test_save_object_falls_back_to_insert(self, plugin, store, package, document):
        new = document.create_element("pip", "vendor\\New", {"name": "fresh"})
        old = document.create_element("pip", "vendor\\Old", {"name": "gone"})

        plugin.save_object(new, old)

        assert store.get_plugin("fresh", package.id).class_name == "vendor\\New"


class TestInstallationStore:

    def test_register_package_is_idempotent(self, store, package):
        again = store.register_package(Package(package=package.package))

        assert again.id == package.id
        assert again.package_name == "Forum"

    def test_register_package_with_explicit_id(self, store):
        package = store.register_package(Package(id=42, package="com.example.fixed"))

        assert package.id == 42
        assert store.get_package(42).package == "com.example.fixed"

    def test_plugin_name_exists_across_packages(self, store, package):
        store.insert("package_installation_plugin", {
            "pluginName": "foo", "className": "X", "priority": 0, "packageID": package.id,
        })

        assert store.plugin_name_exists("foo")
        assert not store.plugin_name_exists("bar")

    def test_transaction_rollback(self, store, package):
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.insert("package_installation_plugin", {
                    "pluginName": "foo", "className": "X", "priority": 0, "packageID": package.id,
                })
                raise RuntimeError("abort")

        assert store.list_plugins(package.id) == []

    def test_nested_transaction_commits_once(self, store, package):
        with store.transaction():
            with store.transaction():
                store.insert("package_installation_plugin", {
                    "pluginName": "foo", "className": "X", "priority": 0, "packageID": package.id,
                })
            assert store._transaction_depth == 1

        assert store._transaction_depth == 0
        assert plugin_names(store, package.id) == ["foo"]

    def test_unique_plugin_per_package(self, store, package):
        row = {"pluginName": "foo", "className": "X", "priority": 0, "packageID": package.id}
        store.insert("package_installation_plugin", row)

        with pytest.raises(sqlite3.IntegrityError):
            store.insert("package_installation_plugin", row)

    def test_list_plugins_ordered_by_priority(self, store, package):
        core = store.register_package(Package(package=CORE_PACKAGE))
        store.insert("package_installation_plugin", {
            "pluginName": "zeta", "className": "Z", "priority": 1, "packageID": core.id,
        })
        store.insert("package_installation_plugin", {
            "pluginName": "alpha", "className": "A", "priority": 0, "packageID": package.id,
        })

        assert [row.plugin_name for row in store.list_plugins()] == ["zeta", "alpha"]
