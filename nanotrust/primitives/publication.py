"""
nanotrust — Publication Primitive

A publication is an immutable, identified unit made of four disjoint
sub-graphs: head, assertion, provenance and pubinfo. The head graph names
the other three. Once finalized, the publication URI embeds a content
address computed over every statement (see systems.trusty).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import Field
from rdflib import URIRef
from rdflib.namespace import RDF

from nanotrust.errors import MalformedPublicationError
from nanotrust.primitives.common import NP, NanoBaseModel, Quad, format_node


class Publication(NanoBaseModel):
    """A nanopublication: four named graphs plus their namespace declarations."""

    uri: URIRef
    head_uri: URIRef
    assertion_uri: URIRef
    provenance_uri: URIRef
    pubinfo_uri: URIRef
    head: tuple[Quad, ...]
    assertion: tuple[Quad, ...]
    provenance: tuple[Quad, ...]
    pubinfo: tuple[Quad, ...]
    namespaces: dict[str, str] = Field(default_factory=dict)

    @property
    def statements(self) -> list[Quad]:
        """Every statement, in head, assertion, provenance, pubinfo order."""
        return [*self.head, *self.assertion, *self.provenance, *self.pubinfo]

    @property
    def graph_uris(self) -> tuple[URIRef, URIRef, URIRef, URIRef]:
        return (self.head_uri, self.assertion_uri, self.provenance_uri, self.pubinfo_uri)

    def __len__(self) -> int:
        return len(self.head) + len(self.assertion) + len(self.provenance) + len(self.pubinfo)

    # ─── Construction ───────────────────────────────────────────────

    @classmethod
    def from_quads(
        cls,
        quads: Iterable[Quad],
        namespaces: Mapping[str, str] | None = None,
    ) -> Publication:
        """
        Assemble a publication from a flat statement set.

        Structural checks:
          1. Exactly one (N, rdf:type, np:Nanopublication, H) statement
          2. H holds exactly one hasAssertion / hasProvenance /
             hasPublicationInfo link from N, each to a URI
          3. The four graph URIs are distinct
          4. Every statement lives in one of the four graphs
          5. Assertion, provenance and pubinfo are non-empty

        Raises MalformedPublicationError on any violation.
        """
        quads = _dedupe(list(quads))

        heads = [q for q in quads if q[1] == RDF.type and q[2] == NP.Nanopublication]
        if not heads:
            raise MalformedPublicationError("No nanopublication URI found")
        if len(heads) > 1:
            raise MalformedPublicationError(
                "Multiple nanopublication URIs found: "
                + ", ".join(format_node(q[0]) for q in heads)
            )
        np_uri, _, _, head_uri = heads[0]
        if not isinstance(np_uri, URIRef):
            raise MalformedPublicationError("Nanopublication must be identified by a URI")
        if not isinstance(head_uri, URIRef):
            raise MalformedPublicationError("Head statement must be in a named graph")

        assertion_uri = _single_link(quads, np_uri, head_uri, NP.hasAssertion)
        provenance_uri = _single_link(quads, np_uri, head_uri, NP.hasProvenance)
        pubinfo_uri = _single_link(quads, np_uri, head_uri, NP.hasPublicationInfo)

        graph_uris = (head_uri, assertion_uri, provenance_uri, pubinfo_uri)
        if len(set(graph_uris)) != len(graph_uris):
            raise MalformedPublicationError("Graph URIs of a nanopublication must be distinct")

        parts: dict[URIRef, list[Quad]] = {g: [] for g in graph_uris}
        for quad in quads:
            context = quad[3]
            if context not in parts:
                raise MalformedPublicationError(
                    f"Statement in graph {format_node(context)} does not belong to "
                    f"nanopublication {np_uri}"
                )
            parts[context].append(quad)

        for label, graph in (
            ("assertion", assertion_uri),
            ("provenance", provenance_uri),
            ("publication info", pubinfo_uri),
        ):
            if not parts[graph]:
                raise MalformedPublicationError(f"Empty {label} graph: {graph}")

        return cls(
            uri=np_uri,
            head_uri=head_uri,
            assertion_uri=assertion_uri,
            provenance_uri=provenance_uri,
            pubinfo_uri=pubinfo_uri,
            head=tuple(parts[head_uri]),
            assertion=tuple(parts[assertion_uri]),
            provenance=tuple(parts[provenance_uri]),
            pubinfo=tuple(parts[pubinfo_uri]),
            namespaces=dict(namespaces or {}),
        )


def _single_link(
    quads: list[Quad],
    np_uri: URIRef,
    head_uri: URIRef,
    predicate: URIRef,
) -> URIRef:
    targets = {
        q[2] for q in quads
        if q[0] == np_uri and q[1] == predicate and q[3] == head_uri
    }
    name = predicate.split("#")[-1]
    if not targets:
        raise MalformedPublicationError(f"Head graph has no {name} link")
    if len(targets) > 1:
        raise MalformedPublicationError(f"Head graph has multiple {name} links")
    target = targets.pop()
    if not isinstance(target, URIRef):
        raise MalformedPublicationError(f"{name} must point to a graph URI")
    return target


def _dedupe(quads: list[Quad]) -> list[Quad]:
    seen: set[Quad] = set()
    unique: list[Quad] = []
    for quad in quads:
        if quad not in seen:
            seen.add(quad)
            unique.append(quad)
    return unique
