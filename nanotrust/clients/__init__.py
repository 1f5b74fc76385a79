"""
nanotrust — External Collaborators

RDF parsing/serialization and HTTP fetching.
"""

from nanotrust.clients.fetch import AsyncHttpFetcher, HttpFetcher
from nanotrust.clients.rdf import (
    parse_publication,
    parse_publications,
    serialize_publication,
    serialize_publications,
)

__all__ = [
    "AsyncHttpFetcher",
    "HttpFetcher",
    "parse_publication",
    "parse_publications",
    "serialize_publication",
    "serialize_publications",
]
