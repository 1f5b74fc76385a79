"""
nanotrust — Self-Certifying Retriever

Fetches a publication by content address from a list of interchangeable,
untrusted servers.

Because identifiers are content-addressed, a dishonest or stale server can
at worst return content that fails self-certification, which is detected
locally. The first candidate whose response self-certifies under the
requested code wins; no agreement among servers is needed.

Per-candidate failures (transport, parse, structure, self-certification)
are logged and discarded. Only a malformed input identifier raises, and it
does so before any network activity.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Callable
from functools import partial

import httpx
import structlog

from nanotrust.clients.fetch import AsyncHttpFetcher, HttpFetcher
from nanotrust.clients.rdf import parse_publication
from nanotrust.config import RetrievalConfig
from nanotrust.errors import (
    InvalidIdentifierError,
    MalformedPublicationError,
    WrongArtifactTypeError,
)
from nanotrust.primitives.publication import Publication
from nanotrust.systems.retrieval.candidates import CandidateServerSource, StaticServerSource
from nanotrust.telemetry.logging import retrieval_context
from nanotrust.systems.trusty.codes import (
    MODULE_ID,
    get_artifact_code,
    is_artifact_code,
    is_potential_trusty_uri,
)
from nanotrust.systems.trusty.transform import is_self_certifying

logger = structlog.get_logger("nanotrust.systems.retrieval.retriever")

Fetch = Callable[[str], bytes]
AsyncFetch = Callable[[str], Awaitable[bytes]]
Parse = Callable[[bytes], Publication]

# Failures that only disqualify one candidate
_CANDIDATE_ERRORS = (httpx.HTTPError, OSError, MalformedPublicationError)


def normalize_identifier(identifier: str) -> str:
    """
    The bare artifact code for a publication URI or artifact code.

    Raises InvalidIdentifierError for a malformed identifier and
    WrongArtifactTypeError when the code is not an RA code.
    """
    identifier = identifier.strip()
    if identifier.find(":") > 0:
        if not is_potential_trusty_uri(identifier):
            raise InvalidIdentifierError(f"Not a well-formed trusty URI: {identifier}")
        code = get_artifact_code(identifier)
        assert code is not None
    else:
        if not is_artifact_code(identifier):
            raise InvalidIdentifierError(f"Not a well-formed artifact code: {identifier}")
        code = identifier
    if not code.startswith(MODULE_ID):
        raise WrongArtifactTypeError(f"Not a trusty URI of type {MODULE_ID}: {identifier}")
    return code


class PublicationRetriever:
    """
    Retrieves publications through injected fetch and parse collaborators.

    ``fetch`` backs retrieve(); ``async_fetch`` backs retrieve_async(),
    which fans out up to ``max_parallel`` candidates at a time.
    """

    def __init__(
        self,
        fetch: Fetch | None = None,
        parse: Parse | None = None,
        *,
        async_fetch: AsyncFetch | None = None,
        max_parallel: int = 4,
        rdf_format: str = "trig",
    ) -> None:
        self._fetch = fetch
        self._async_fetch = async_fetch
        self._parse: Parse = parse or partial(parse_publication, rdf_format=rdf_format)
        self._max_parallel = max(1, max_parallel)
        self._logger = logger.bind(component="publication_retriever")

    # ─── Sequential ─────────────────────────────────────────────────

    def retrieve(self, identifier: str, servers: CandidateServerSource) -> Publication | None:
        """
        First self-certifying publication for ``identifier``, or None once
        the candidate source is exhausted.
        """
        if self._fetch is None:
            raise RuntimeError("PublicationRetriever has no fetch collaborator")
        code = normalize_identifier(identifier)
        with retrieval_context(code):
            return self._retrieve_sequential(code, servers)

    def _retrieve_sequential(self, code: str, servers: CandidateServerSource) -> Publication | None:
        assert self._fetch is not None
        attempts = 0
        for server in servers:
            attempts += 1
            try:
                payload = self._fetch(server + code)
                publication = self._parse(payload)
            except _CANDIDATE_ERRORS as exc:
                self._logger.info("candidate_discarded", server=server, reason=_reason(exc))
                continue
            if self._certifies(publication, code, server):
                self._logger.info("publication_retrieved", server=server, attempts=attempts)
                return publication

        self._logger.info("publication_not_found", attempts=attempts)
        return None

    # ─── Parallel ───────────────────────────────────────────────────

    async def retrieve_async(
        self,
        identifier: str,
        servers: CandidateServerSource,
    ) -> Publication | None:
        """
        Like retrieve(), fanning candidates out in batches of ``max_parallel``.

        The first self-certifying response wins and the rest of its batch is
        cancelled. None is returned only after every launched attempt has
        concluded.
        """
        if self._async_fetch is None:
            raise RuntimeError("PublicationRetriever has no async fetch collaborator")
        code = normalize_identifier(identifier)
        with retrieval_context(code):
            return await self._retrieve_batches(code, servers)

    async def _retrieve_batches(
        self,
        code: str,
        servers: CandidateServerSource,
    ) -> Publication | None:
        candidates = iter(servers)
        attempts = 0
        while True:
            batch = list(itertools.islice(candidates, self._max_parallel))
            if not batch:
                self._logger.info("publication_not_found", attempts=attempts)
                return None
            attempts += len(batch)

            tasks = [asyncio.create_task(self._attempt_async(code, server)) for server in batch]
            try:
                for next_done in asyncio.as_completed(tasks):
                    publication = await next_done
                    if publication is not None:
                        self._logger.info("publication_retrieved", attempts=attempts)
                        return publication
            finally:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

    async def _attempt_async(self, code: str, server: str) -> Publication | None:
        assert self._async_fetch is not None
        try:
            payload = await self._async_fetch(server + code)
            publication = self._parse(payload)
        except _CANDIDATE_ERRORS as exc:
            self._logger.info("candidate_discarded", server=server, reason=_reason(exc))
            return None
        return publication if self._certifies(publication, code, server) else None

    # ─── Self-certification ─────────────────────────────────────────

    def _certifies(self, publication: Publication, code: str, server: str) -> bool:
        claimed = get_artifact_code(str(publication.uri))
        if claimed != code:
            self._logger.info(
                "candidate_discarded",
                server=server,
                reason="code_mismatch",
                claimed=claimed,
            )
            return False
        if not is_self_certifying(publication):
            self._logger.info(
                "candidate_discarded",
                server=server,
                reason="not_self_certifying",
            )
            return False
        return True


def _reason(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


def retrieve(
    identifier: str,
    servers: CandidateServerSource | None = None,
    *,
    config: RetrievalConfig | None = None,
) -> Publication | None:
    """
    Fetch ``identifier`` over HTTP from ``servers``, or from the configured
    server list when none is given.
    """
    config = config or RetrievalConfig()
    source = servers if servers is not None else StaticServerSource.from_config(config)
    rdf_format = "nquads" if config.accept == "application/n-quads" else "trig"
    with HttpFetcher(timeout_s=config.request_timeout_s, accept=config.accept) as fetcher:
        retriever = PublicationRetriever(fetcher, rdf_format=rdf_format)
        return retriever.retrieve(identifier, source)


async def retrieve_async(
    identifier: str,
    servers: CandidateServerSource | None = None,
    *,
    config: RetrievalConfig | None = None,
) -> Publication | None:
    config = config or RetrievalConfig()
    source = servers if servers is not None else StaticServerSource.from_config(config)
    rdf_format = "nquads" if config.accept == "application/n-quads" else "trig"
    async with AsyncHttpFetcher(timeout_s=config.request_timeout_s, accept=config.accept) as fetcher:
        retriever = PublicationRetriever(
            async_fetch=fetcher, max_parallel=config.max_parallel, rdf_format=rdf_format,
        )
        return await retriever.retrieve_async(identifier, source)
