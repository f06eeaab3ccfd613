"""
Routemark Discovery - finds decorated controllers, filters and sockets.

Re-exports:
    - PackageScanner: walks packages and collects decorated declarations
    - discover: one-shot ``(declaring_type, member, metadata)`` enumeration
    - MetadataKind: which marker to look for
"""

from .scanner import Discovered, MetadataKind, PackageScanner, discover

__all__ = [
    "Discovered",
    "MetadataKind",
    "PackageScanner",
    "discover",
]
