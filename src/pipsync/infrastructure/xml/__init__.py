"""
XML infrastructure package.

Provides the PIP document store built on lxml.
"""

from pipsync.infrastructure.xml.document import XmlDocument, local_name

__all__ = [
    "XmlDocument",
    "local_name",
]
