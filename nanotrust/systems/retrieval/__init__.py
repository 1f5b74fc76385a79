"""
nanotrust — Self-Certifying Retrieval

Fetching publications by content address from untrusted servers.
"""

from nanotrust.systems.retrieval.candidates import CandidateServerSource, StaticServerSource
from nanotrust.systems.retrieval.retriever import (
    PublicationRetriever,
    normalize_identifier,
    retrieve,
    retrieve_async,
)

__all__ = [
    "CandidateServerSource",
    "PublicationRetriever",
    "StaticServerSource",
    "normalize_identifier",
    "retrieve",
    "retrieve_async",
]
