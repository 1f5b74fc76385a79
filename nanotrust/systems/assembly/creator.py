"""
nanotrust — Publication Creator

Authoring helper for new, unsigned publications. Statements are collected
under a provisional URI; build() yields the unsigned publication (the input
the signer expects) and finalize() yields a content-addressed one.
"""

from __future__ import annotations

from datetime import datetime

from rdflib import Literal, URIRef
from rdflib.namespace import RDF, XSD

from nanotrust.primitives.common import (
    DCT,
    DEFAULT_NAMESPACES,
    NP,
    TEMP_NAMESPACE,
    Node,
    Quad,
    Resource,
    new_id,
    utc_now,
)
from nanotrust.primitives.publication import Publication
from nanotrust.systems.trusty.transform import finalize


def provisional_uri(namespace: str = TEMP_NAMESPACE) -> URIRef:
    """A fresh provisional publication URI, e.g. http://purl.org/nanopub/temp/<id>/."""
    return URIRef(f"{namespace}{new_id()}/")


class PublicationCreator:
    """
    Collects statements for one publication.

    Graph URIs derive from the publication URI: <N>Head, <N>assertion,
    <N>provenance, <N>pubinfo.
    """

    def __init__(self, uri: URIRef | str | None = None) -> None:
        self.uri = URIRef(uri) if uri is not None else provisional_uri()
        self.head_uri = URIRef(self.uri + "Head")
        self.assertion_uri = URIRef(self.uri + "assertion")
        self.provenance_uri = URIRef(self.uri + "provenance")
        self.pubinfo_uri = URIRef(self.uri + "pubinfo")
        self._assertion: list[Quad] = []
        self._provenance: list[Quad] = []
        self._pubinfo: list[Quad] = []
        self._namespaces: dict[str, str] = {}

    # ─── Namespaces ─────────────────────────────────────────────────

    def add_namespace(self, prefix: str, uri: str) -> None:
        self._namespaces[prefix] = str(uri)

    def add_default_namespaces(self) -> None:
        for prefix, uri in DEFAULT_NAMESPACES.items():
            self._namespaces.setdefault(prefix, uri)
        self._namespaces.setdefault("this", str(self.uri))

    # ─── Statements ─────────────────────────────────────────────────

    def add_assertion_statement(self, subject: Resource, predicate: URIRef, obj: Node) -> None:
        self._assertion.append((subject, predicate, obj, self.assertion_uri))

    def add_provenance_statement(
        self,
        predicate: URIRef,
        obj: Node,
        subject: Resource | None = None,
    ) -> None:
        """Subject defaults to the assertion graph."""
        subject = subject if subject is not None else self.assertion_uri
        self._provenance.append((subject, predicate, obj, self.provenance_uri))

    def add_pubinfo_statement(
        self,
        predicate: URIRef,
        obj: Node,
        subject: Resource | None = None,
    ) -> None:
        """Subject defaults to the publication itself."""
        subject = subject if subject is not None else self.uri
        self._pubinfo.append((subject, predicate, obj, self.pubinfo_uri))

    def add_creator(self, creator: URIRef | str) -> None:
        self.add_pubinfo_statement(DCT.creator, URIRef(creator))

    def add_timestamp(self, timestamp: datetime | None = None) -> None:
        timestamp = timestamp if timestamp is not None else utc_now()
        self.add_pubinfo_statement(DCT.created, Literal(timestamp, datatype=XSD.dateTime))

    # ─── Output ─────────────────────────────────────────────────────

    def head_statements(self) -> list[Quad]:
        return [
            (self.uri, RDF.type, NP.Nanopublication, self.head_uri),
            (self.uri, NP.hasAssertion, self.assertion_uri, self.head_uri),
            (self.uri, NP.hasProvenance, self.provenance_uri, self.head_uri),
            (self.uri, NP.hasPublicationInfo, self.pubinfo_uri, self.head_uri),
        ]

    def statements(self) -> list[Quad]:
        return [*self.head_statements(), *self._assertion, *self._provenance, *self._pubinfo]

    def build(self) -> Publication:
        """
        The unsigned publication under its provisional URI.

        Raises MalformedPublicationError if a required graph is empty.
        """
        return Publication.from_quads(self.statements(), self._namespaces)

    def finalize(self) -> Publication:
        """The unsigned, content-addressed publication."""
        return finalize(self.statements(), self.uri, self._namespaces)
