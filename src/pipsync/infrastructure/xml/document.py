"""
XML document store for PIP files.

Loads, queries and persists one PIP document. Documents follow the layout

    <data>
        <import>
            <pip name="foo">vendor\\plugin\\FooPlugin</pip>
        </import>
        <delete>
            <pip name="bar"/>
        </delete>
    </data>

optionally within a default namespace. All lookups are namespace-agnostic
(matched on local names) so hand-written files with or without the schema
namespace behave the same.

Writes are whole-document rewrites: the tree is indented, written to a
temporary sibling file, re-parsed to make sure it is well-formed and then
moved over the target with os.replace.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from lxml import etree

from pipsync.domain.errors import XmlParseError

logger = logging.getLogger(__name__)

DEFAULT_ROOT_TAG = "data"
DEFAULT_INDENT = "\t"


def _parser() -> etree.XMLParser:
    return etree.XMLParser(remove_blank_text=True, resolve_entities=False)


def local_name(node) -> str | None:
    """Local tag name of an element, None for comments and processing instructions."""
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


class XmlDocument:
    """
    One PIP document bound to a path.

    Usage:
        document = XmlDocument.load(Path("packageInstallationPlugin.xml"))
        for element in document.entries("import", "pip"):
            print(element.get("name"))
        document.write()
    """

    def __init__(self, tree: etree._ElementTree, path: Path | None = None,
                 indent: str = DEFAULT_INDENT) -> None:
        self.tree = tree
        self.path = Path(path) if path is not None else None
        self.indent = indent

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def load(cls, path: Path | str, indent: str = DEFAULT_INDENT) -> XmlDocument:
        """
        Parse a document from disk.

        Raises:
            FileNotFoundError: If the file does not exist
            XmlParseError: If the file is not well-formed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PIP file not found: {path}")

        try:
            tree = etree.parse(str(path), _parser())
        except etree.XMLSyntaxError as e:
            raise XmlParseError(path, str(e)) from e

        logger.debug("Loaded XML document %s", path)
        return cls(tree, path, indent)

    @classmethod
    def from_string(cls, content: str | bytes, path: Path | str | None = None,
                    indent: str = DEFAULT_INDENT) -> XmlDocument:
        if isinstance(content, str):
            content = content.encode("utf-8")
        try:
            root = etree.fromstring(content, _parser())
        except etree.XMLSyntaxError as e:
            raise XmlParseError(path or "<string>", str(e)) from e
        return cls(etree.ElementTree(root), path, indent)

    @classmethod
    def create(cls, path: Path | str | None = None, root_tag: str = DEFAULT_ROOT_TAG,
               namespace: str | None = None, indent: str = DEFAULT_INDENT) -> XmlDocument:
        """Build an empty document with <import> and <delete> containers."""
        nsmap = {None: namespace} if namespace else None
        tag = etree.QName(namespace, root_tag).text if namespace else root_tag
        root = etree.Element(tag, nsmap=nsmap)
        document = cls(etree.ElementTree(root), path, indent)
        document.ensure_container("import")
        document.ensure_container("delete")
        return document

    @classmethod
    def load_or_create(cls, path: Path | str, indent: str = DEFAULT_INDENT) -> XmlDocument:
        path = Path(path)
        if path.exists():
            return cls.load(path, indent)
        logger.info("PIP file %s does not exist yet, starting an empty document", path)
        return cls.create(path, indent=indent)

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()

    @property
    def namespace(self) -> str | None:
        return etree.QName(self.root).namespace

    def qualify(self, tag: str) -> str:
        """Tag name in the document's default namespace."""
        if self.namespace:
            return etree.QName(self.namespace, tag).text
        return tag

    def xpath(self, expression: str, **variables) -> list:
        """Evaluate an XPath expression relative to the root element."""
        return self.root.xpath(expression, **variables)

    def containers(self, name: str) -> list:
        """Root children with the given local name (e.g. all <import> elements)."""
        return self.xpath("./*[local-name() = $name]", name=name)

    def entries(self, container: str, tag: str) -> list:
        """Entry elements with local name `tag` inside the given containers."""
        return self.xpath(
            "./*[local-name() = $container]/*[local-name() = $tag]",
            container=container,
            tag=tag,
        )

    # ========================================================================
    # Mutation helpers
    # ========================================================================

    def ensure_container(self, name: str) -> etree._Element:
        """Return the first container with this name, appending one if missing."""
        existing = self.containers(name)
        if existing:
            return existing[0]
        container = etree.SubElement(self.root, self.qualify(name))
        logger.debug("Created <%s> container in %s", name, self.path)
        return container

    def create_element(self, tag: str, text: str | None = None,
                       attributes: dict[str, str] | None = None) -> etree._Element:
        """Create a detached element in the document's namespace."""
        element = etree.Element(self.qualify(tag))
        for key, value in (attributes or {}).items():
            element.set(key, value)
        if text:
            element.text = text
        return element

    # ========================================================================
    # Serialization
    # ========================================================================

    def to_string(self) -> str:
        """Indented serialization of the current tree."""
        etree.indent(self.tree, space=self.indent)
        return etree.tostring(self.tree, encoding="unicode", pretty_print=True)

    def canonical(self) -> str:
        """C14N form of the root element, for structural comparisons."""
        return etree.tostring(self.root, method="c14n").decode("utf-8")

    def write(self, path: Path | str | None = None) -> Path:
        """
        Persist the document.

        Args:
            path: Target path, defaults to the path the document was loaded from

        Returns:
            The written path

        Raises:
            ValueError: If no path is known
            XmlParseError: If the serialized document does not parse back
            OSError: On I/O failure
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("Document has no path to write to")

        target.parent.mkdir(parents=True, exist_ok=True)
        etree.indent(self.tree, space=self.indent)

        temp_path = target.with_name(f".{target.name}.tmp")
        try:
            self.tree.write(
                str(temp_path),
                encoding="UTF-8",
                xml_declaration=True,
                pretty_print=True,
            )
            etree.parse(str(temp_path), _parser())
            os.replace(temp_path, target)
        except etree.XMLSyntaxError as e:
            temp_path.unlink(missing_ok=True)
            raise XmlParseError(target, str(e)) from e
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

        if path is not None:
            self.path = target
        logger.debug("Wrote XML document %s", target)
        return target
