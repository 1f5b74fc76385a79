"""
nanotrust — RDF Client

Parses TriG / N-Quads payloads into publications and serializes them back,
using rdflib datasets. A payload may hold several publications; statements
are routed to the publication whose head graph names their graph.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

import structlog
from rdflib import Dataset, Graph, URIRef
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.namespace import RDF, NamespaceManager

from nanotrust.errors import MalformedPublicationError, PublicationParseError
from nanotrust.primitives.common import NP, Quad
from nanotrust.primitives.publication import Publication

logger = structlog.get_logger("nanotrust.clients.rdf")

SUPPORTED_FORMATS: dict[str, str] = {
    "trig": "application/trig",
    "nquads": "application/n-quads",
}

_HEAD_LINKS = (NP.hasAssertion, NP.hasProvenance, NP.hasPublicationInfo)


def read_quads(payload: bytes | str, rdf_format: str = "trig") -> tuple[list[Quad], dict[str, str]]:
    """
    Parse ``payload`` into quads plus the namespace prefixes it declares.

    Raises PublicationParseError on any syntax error.
    """
    _check_format(rdf_format)
    dataset = _bare(Dataset())
    # The parser borrows the namespace manager of the graph it fills
    target = _bare(dataset.graph(DATASET_DEFAULT_GRAPH_ID))
    try:
        target.parse(data=payload, format=rdf_format)
    except Exception as exc:
        raise PublicationParseError(f"Invalid {rdf_format} payload: {exc}") from exc

    quads: list[Quad] = []
    for s, p, o, g in dataset.quads((None, None, None, None)):
        context = getattr(g, "identifier", g)
        if context == DATASET_DEFAULT_GRAPH_ID:
            context = None
        quads.append((s, p, o, context))
    namespaces = {prefix: str(uri) for prefix, uri in dataset.namespaces() if prefix}
    return quads, namespaces


def parse_publications(payload: bytes | str, rdf_format: str = "trig") -> list[Publication]:
    """
    Every publication in ``payload``, in order of their head statements.

    Raises PublicationParseError for syntax errors and MalformedPublicationError
    for statements outside every publication or structurally invalid ones.
    """
    quads, namespaces = read_quads(payload, rdf_format)

    heads = [
        (q[0], q[3]) for q in quads
        if q[1] == RDF.type and q[2] == NP.Nanopublication and q[3] is not None
    ]
    if not heads:
        raise MalformedPublicationError("No nanopublication found in payload")

    owner: dict[URIRef, int] = {}
    for index, (np_uri, head_uri) in enumerate(heads):
        graphs = {head_uri} | {
            q[2] for q in quads
            if q[0] == np_uri and q[3] == head_uri and q[1] in _HEAD_LINKS
        }
        for graph in graphs:
            if graph in owner:
                raise MalformedPublicationError(f"Graph {graph} is shared by two publications")
            owner[graph] = index

    grouped: list[list[Quad]] = [[] for _ in heads]
    for quad in quads:
        if quad[3] not in owner:
            raise MalformedPublicationError(
                f"Statement outside of any publication graph: {quad[0]} {quad[1]} {quad[2]}"
            )
        grouped[owner[quad[3]]].append(quad)

    publications = [Publication.from_quads(group, namespaces) for group in grouped]
    logger.debug("payload_parsed", format=rdf_format, publications=len(publications))
    return publications


def parse_publication(payload: bytes | str, rdf_format: str = "trig") -> Publication:
    """The single publication in ``payload``."""
    publications = parse_publications(payload, rdf_format)
    if len(publications) != 1:
        raise MalformedPublicationError(
            f"Expected one publication, found {len(publications)}"
        )
    return publications[0]


def serialize_publications(publications: Iterable[Publication], rdf_format: str = "trig") -> str:
    _check_format(rdf_format)
    dataset = _bare(Dataset())
    for publication in publications:
        for prefix, uri in publication.namespaces.items():
            dataset.bind(prefix, uri, override=True)
        for s, p, o, g in publication.statements:
            dataset.graph(g).add((s, p, o))
    return dataset.serialize(format=rdf_format)


def serialize_publication(publication: Publication, rdf_format: str = "trig") -> str:
    return serialize_publications([publication], rdf_format)


def _check_format(rdf_format: str) -> None:
    if rdf_format not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported RDF format {rdf_format!r}; expected one of {sorted(SUPPORTED_FORMATS)}"
        )


_G = TypeVar("_G", bound=Graph)


def _bare(graph: _G) -> _G:
    """Bind only the prefixes a payload or publication declares."""
    graph.namespace_manager = NamespaceManager(graph, bind_namespaces="none")
    return graph
