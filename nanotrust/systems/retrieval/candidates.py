"""
nanotrust — Candidate Server Sources

A candidate server source is any iterable of server base URLs. The
retriever consumes it lazily, in the order produced; ordering, refresh and
pacing are the source's policy, not the retriever's.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nanotrust.config import RetrievalConfig

CandidateServerSource = Iterable[str]


class StaticServerSource:
    """
    A fixed list of servers. Re-iterable; each iteration yields the list in
    configured order, or freshly shuffled when ``shuffle`` is set.
    """

    def __init__(self, servers: Iterable[str], *, shuffle: bool = False) -> None:
        self._servers = [s if s.endswith("/") else s + "/" for s in servers]
        self._shuffle = shuffle

    @classmethod
    def from_config(cls, config: RetrievalConfig) -> StaticServerSource:
        return cls(config.servers, shuffle=config.shuffle)

    @property
    def servers(self) -> list[str]:
        return list(self._servers)

    def __iter__(self) -> Iterator[str]:
        servers = list(self._servers)
        if self._shuffle:
            random.shuffle(servers)
        return iter(servers)

    def __len__(self) -> int:
        return len(self._servers)
