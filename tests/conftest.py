"""
Shared fixtures for pipsync tests.

Provides an in-memory installation store, a registered package and sample
PIP documents on disk.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

import pytest

from pipsync.application.plugins.pip_plugin import PipInstallationPlugin
from pipsync.domain.models import Package, PackageInstallation
from pipsync.infrastructure.sqlite import InstallationStore
from pipsync.infrastructure.xml import XmlDocument

NAMESPACED_PIP_XML = r"""<?xml version="1.0" encoding="UTF-8"?>
<data xmlns="http://www.woltlab.com" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://www.woltlab.com http://www.woltlab.com/XSD/tornado/packageInstallationPlugin.xsd">
	<delete>
		<pip name="retired"/>
	</delete>
	<import>
		<pip name="zeta">vendor\plugin\ZetaPlugin</pip>
		<pip name="alpha">vendor\plugin\AlphaPlugin</pip>
		<pip name="mu">vendor\plugin\MuPlugin</pip>
	</import>
</data>
"""

PLAIN_PIP_XML = r"""<?xml version="1.0" encoding="UTF-8"?>
<data>
	<import>
		<pip name="foo">vendor\plugin\FooPlugin</pip>
		<pip name="bar">vendor\plugin\BarPlugin</pip>
	</import>
</data>
"""


@pytest.fixture
def store():
    store = InstallationStore(":memory:")
    store.initialize_schema()
    yield store
    store.close()


@pytest.fixture
def package(store):
    return store.register_package(Package(package="com.example.forum", package_name="Forum"))


@pytest.fixture
def plugin(store, package):
    return PipInstallationPlugin(store, PackageInstallation(package))


@pytest.fixture
def pip_file(tmp_path):
    path = tmp_path / "packageInstallationPlugin.xml"
    path.write_text(NAMESPACED_PIP_XML, encoding="utf-8")
    return path


@pytest.fixture
def document(pip_file):
    return XmlDocument.load(pip_file)


def write_pip_file(path: Path, content: str = PLAIN_PIP_XML) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def entry_names(document: XmlDocument, container: str = "import") -> list[str]:
    return [element.get("name") for element in document.entries(container, "pip")]
