"""
Unit tests for Publication structural checks.
"""

from __future__ import annotations

import pytest
from rdflib import Literal, Namespace, URIRef
from rdflib.namespace import RDF

from nanotrust.errors import MalformedPublicationError
from nanotrust.primitives.common import NP
from nanotrust.primitives.publication import Publication

EX = Namespace("http://example.org/")
N = URIRef("http://example.org/np/")
H = URIRef("http://example.org/np/Head")
A = URIRef("http://example.org/np/assertion")
P = URIRef("http://example.org/np/provenance")
I = URIRef("http://example.org/np/pubinfo")


def _quads(**overrides):
    quads = {
        "type": (N, RDF.type, NP.Nanopublication, H),
        "assertion_link": (N, NP.hasAssertion, A, H),
        "provenance_link": (N, NP.hasProvenance, P, H),
        "pubinfo_link": (N, NP.hasPublicationInfo, I, H),
        "assertion": (EX.alice, EX.knows, EX.bob, A),
        "provenance": (A, EX.source, EX.lab, P),
        "pubinfo": (N, EX.note, Literal("hi"), I),
    }
    quads.update(overrides)
    return [q for q in quads.values() if q is not None]


# ─── Valid Structure ────────────────────────────────────────────


class TestValidPublication:
    def test_graphs_are_split(self):
        publication = Publication.from_quads(_quads(), {"ex": str(EX)})
        assert publication.uri == N
        assert publication.graph_uris == (H, A, P, I)
        assert len(publication.head) == 4
        assert publication.assertion == ((EX.alice, EX.knows, EX.bob, A),)
        assert publication.namespaces == {"ex": str(EX)}
        assert len(publication) == 7

    def test_duplicates_are_collapsed(self):
        quads = _quads()
        publication = Publication.from_quads(quads + quads)
        assert len(publication) == 7

    def test_statements_is_a_fresh_list(self):
        publication = Publication.from_quads(_quads())
        publication.statements.append((EX.x, EX.y, EX.z, A))
        assert len(publication.statements) == 7


# ─── Structural Violations ──────────────────────────────────────


class TestMalformedPublication:
    def test_missing_type_statement(self):
        with pytest.raises(MalformedPublicationError, match="No nanopublication URI"):
            Publication.from_quads(_quads(type=None))

    def test_two_type_statements(self):
        quads = _quads() + [(URIRef("http://example.org/other"), RDF.type, NP.Nanopublication, H)]
        with pytest.raises(MalformedPublicationError, match="Multiple nanopublication URIs"):
            Publication.from_quads(quads)

    def test_missing_link(self):
        with pytest.raises(MalformedPublicationError, match="hasProvenance"):
            Publication.from_quads(_quads(provenance_link=None))

    def test_shared_graph_uri(self):
        with pytest.raises(MalformedPublicationError, match="distinct"):
            Publication.from_quads(_quads(
                pubinfo_link=(N, NP.hasPublicationInfo, P, H),
                pubinfo=(N, EX.note, Literal("hi"), P),
            ))

    def test_stray_statement(self):
        quads = _quads() + [(EX.s, EX.p, EX.o, URIRef("http://example.org/elsewhere"))]
        with pytest.raises(MalformedPublicationError, match="does not belong"):
            Publication.from_quads(quads)

    def test_empty_assertion(self):
        with pytest.raises(MalformedPublicationError, match="Empty assertion"):
            Publication.from_quads(_quads(assertion=None))

    def test_default_graph_head(self):
        with pytest.raises(MalformedPublicationError, match="named graph"):
            Publication.from_quads(_quads(type=(N, RDF.type, NP.Nanopublication, None)))
