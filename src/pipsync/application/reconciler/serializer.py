"""
Deterministic ordering of PIP documents.

Runs before every write so that hand-edited files get normalized too and
repeated writes produce minimal diffs:
- <import> containers come before <delete> containers
- entries inside each container are sorted by their business key

All sorts are stable: entries with equal keys keep their document order.
"""

from __future__ import annotations

from typing import Callable, Iterable

from pipsync.infrastructure.xml import XmlDocument, local_name


def sort_import_delete(document: XmlDocument) -> None:
    """Move all <import> containers ahead of all <delete> containers."""
    root = document.root
    children = list(root)
    imports = [child for child in children if local_name(child) == "import"]
    deletes = [child for child in children if local_name(child) == "delete"]
    if not imports or not deletes:
        return

    containers = imports + deletes
    current = [child for child in children if child in containers]
    if current == containers:
        return

    position = children.index(current[0])
    for container in containers:
        root.remove(container)
    for offset, container in enumerate(containers):
        root.insert(position + offset, container)


def sort_child_nodes(containers: Iterable, key: Callable) -> None:
    """
    Stable-sort the entry elements of each container by `key`.

    Comments and other non-element nodes are kept ahead of the entries.
    """
    for container in containers:
        children = list(container)
        others = [child for child in children if local_name(child) is None]
        entries = [child for child in children if local_name(child) is not None]
        ordered = others + sorted(entries, key=key)
        if ordered == children:
            continue

        for child in children:
            container.remove(child)
        container.extend(ordered)


class DocumentSorter:
    """Domain sort of a PIP document: import/delete order, then entries by key."""

    def __init__(self, key: Callable) -> None:
        self.key = key

    def sort(self, document: XmlDocument) -> None:
        sort_import_delete(document)
        sort_child_nodes(document.containers("import"), self.key)
        sort_child_nodes(document.containers("delete"), self.key)
