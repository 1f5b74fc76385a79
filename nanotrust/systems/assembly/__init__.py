"""
nanotrust — Publication Assembly

Authoring unsigned publications, one at a time or from a statement stream.
"""

from nanotrust.systems.assembly.builder import (
    BuildOptions,
    NamespaceEvent,
    build_publications,
)
from nanotrust.systems.assembly.creator import PublicationCreator, provisional_uri

__all__ = [
    "BuildOptions",
    "NamespaceEvent",
    "PublicationCreator",
    "build_publications",
    "provisional_uri",
]
