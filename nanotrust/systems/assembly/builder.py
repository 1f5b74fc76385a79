"""
nanotrust — Streaming Publication Builder

Turns a flat stream of RDF statements into one publication per run of
consecutive statements that share a subject.

The stream is folded into an explicit, immutable accumulator:

  EMPTY               nothing collected yet
  ACCUMULATING(s)     collecting statements with subject s
  READY_TO_FINALIZE   a new subject (or end of stream) closed the group

step() is pure: it returns the next accumulator and, on the flush
transition, the group that was closed. build_publications() drives the fold
and finalizes each closed group.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Tuple, Union

import structlog
from rdflib import URIRef

from nanotrust.primitives.common import PROV, Node, Resource
from nanotrust.primitives.publication import Publication
from nanotrust.systems.assembly.creator import PublicationCreator, provisional_uri

if TYPE_CHECKING:
    from nanotrust.config import PublicationConfig

logger = structlog.get_logger("nanotrust.systems.assembly.builder")

Triple = Tuple[Resource, URIRef, Node]


@dataclass(frozen=True)
class NamespaceEvent:
    prefix: str
    uri: str


StreamEvent = Union[Triple, NamespaceEvent]


class BuildPhase(str, enum.Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    READY_TO_FINALIZE = "ready_to_finalize"


@dataclass(frozen=True)
class BuildOptions:
    """What every built publication carries besides its assertion."""

    creators: tuple[str, ...] = ()
    derived_from: Optional[str] = None
    temp_namespace: Optional[str] = None
    timestamp: Optional[datetime] = None
    # False leaves publications under their provisional URI, ready for signing
    finalize: bool = True

    @classmethod
    def from_config(cls, config: PublicationConfig, *, finalize: bool = True) -> BuildOptions:
        return cls(
            creators=tuple(config.creators),
            derived_from=config.derived_from,
            temp_namespace=config.temp_namespace,
            finalize=finalize,
        )


@dataclass(frozen=True)
class BuildAccumulator:
    phase: BuildPhase = BuildPhase.EMPTY
    subject: Optional[Resource] = None
    triples: tuple[Triple, ...] = ()
    namespaces: tuple[tuple[str, str], ...] = ()
    # Statement that opened the next group while this one awaits its flush
    pending: Optional[Triple] = None


@dataclass(frozen=True)
class ClosedGroup:
    triples: tuple[Triple, ...]
    namespaces: tuple[tuple[str, str], ...] = field(default=())


def step(
    acc: BuildAccumulator,
    event: StreamEvent | None,
) -> tuple[BuildAccumulator, ClosedGroup | None]:
    """
    Advance the fold by one event; ``None`` marks the end of the stream.

    Returns the new accumulator and the group closed by this step, if any.
    READY_TO_FINALIZE is only ever handed to flush(), so the returned
    accumulator is EMPTY or ACCUMULATING.
    """
    if event is None:
        if acc.phase is BuildPhase.ACCUMULATING:
            return flush(replace(acc, phase=BuildPhase.READY_TO_FINALIZE))
        return acc, None

    if isinstance(event, NamespaceEvent):
        return replace(acc, namespaces=(*acc.namespaces, (event.prefix, event.uri))), None

    subject = event[0]
    if acc.phase is BuildPhase.EMPTY:
        return replace(acc, phase=BuildPhase.ACCUMULATING, subject=subject, triples=(event,)), None
    if subject == acc.subject:
        return replace(acc, triples=(*acc.triples, event)), None

    # A new subject closes the current group
    ready = replace(acc, phase=BuildPhase.READY_TO_FINALIZE, pending=event)
    return flush(ready)


def flush(acc: BuildAccumulator) -> tuple[BuildAccumulator, ClosedGroup | None]:
    """READY_TO_FINALIZE -> ACCUMULATING(pending subject) or EMPTY."""
    if acc.phase is not BuildPhase.READY_TO_FINALIZE:
        return acc, None
    closed = ClosedGroup(triples=acc.triples, namespaces=acc.namespaces)
    if acc.pending is None:
        return BuildAccumulator(namespaces=acc.namespaces), closed
    return (
        BuildAccumulator(
            phase=BuildPhase.ACCUMULATING,
            subject=acc.pending[0],
            triples=(acc.pending,),
            namespaces=acc.namespaces,
        ),
        closed,
    )


def build_publications(
    events: Iterable[StreamEvent],
    options: BuildOptions | None = None,
) -> Iterator[Publication]:
    """Fold ``events`` into unsigned publications, one per subject run."""
    options = options or BuildOptions()
    acc = BuildAccumulator()
    for event in events:
        acc, closed = step(acc, event)
        if closed is not None:
            yield assemble(closed, options)
    acc, closed = step(acc, None)
    if closed is not None:
        yield assemble(closed, options)


def assemble(group: ClosedGroup, options: BuildOptions) -> Publication:
    """Wrap a closed group in provenance and pubinfo, finalizing unless told not to."""
    if options.temp_namespace:
        creator = PublicationCreator(provisional_uri(options.temp_namespace))
    else:
        creator = PublicationCreator()
    creator.add_default_namespaces()
    for prefix, uri in group.namespaces:
        creator.add_namespace(prefix, uri)

    creators = list(options.creators) or [str(creator.uri) + "creator"]
    for subject, predicate, obj in group.triples:
        creator.add_assertion_statement(subject, predicate, obj)
    if options.derived_from is not None:
        creator.add_provenance_statement(PROV.wasDerivedFrom, URIRef(options.derived_from))
    else:
        for agent in creators:
            creator.add_provenance_statement(PROV.hadPrimarySource, URIRef(agent))
    for agent in creators:
        creator.add_creator(agent)
    creator.add_timestamp(options.timestamp)

    publication = creator.finalize() if options.finalize else creator.build()
    logger.debug(
        "publication_built",
        uri=str(publication.uri),
        assertion_statements=len(publication.assertion),
    )
    return publication
