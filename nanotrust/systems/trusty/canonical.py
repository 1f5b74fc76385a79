"""
nanotrust — Canonical Form and Digest

Turns a statement set into a deterministic, order-independent sequence and
hashes it.

Algorithm:
  1. Rewrite self-references: under a provisional base URI, every URI that
     starts with the base is rewritten to its final shape with a space where
     the artifact code will go; under an artifact code, the code inside any
     URI is replaced by the space. Both views of the same content therefore
     coincide.
  2. Blank nodes are relabelled by rdflib's canonical (RGDA1) labelling
     and numbered in label order; numbering depends on graph structure
     alone.
  3. Literals keep their lexical form; plain literals are xsd:string.
  4. Duplicates are dropped and statements sorted by
     (context, subject, predicate, object).

digest string = per statement, four lines (context, subject, predicate, object)
artifact code = "RA" + base64url(SHA-256(digest string)) without padding
"""

from __future__ import annotations

import base64
import enum
import hashlib
from collections.abc import Iterable
from typing import NamedTuple, Optional, Tuple

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.compare import to_canonical_graph
from rdflib.namespace import XSD

from nanotrust.errors import MalformedPublicationError
from nanotrust.primitives.common import Node, Quad
from nanotrust.systems.trusty.codes import (
    CODE_PLACEHOLDER,
    MODULE_ID,
    is_artifact_code,
    trusty_uri,
)


class TermKind(str, enum.Enum):
    URI = "uri"
    BNODE = "bnode"
    LITERAL = "literal"


class Term(NamedTuple):
    """A canonical RDF term. URIs may contain the code placeholder."""

    kind: TermKind
    value: str
    datatype: str = ""
    language: str = ""


# (context, subject, predicate, object)
CanonicalStatement = Tuple[Optional[Term], Term, Term, Term]

_NO_CONTEXT = Term(TermKind.URI, "")


def canonicalize(statements: Iterable[Quad], placeholder: str) -> tuple[CanonicalStatement, ...]:
    """
    Canonical, sorted statement sequence of ``statements``.

    ``placeholder`` is either the provisional URI of the owning publication
    (signing, finalization) or its artifact code (verification,
    self-certification).
    """
    statements = _relabel_bnodes(list(statements))
    rewriter = _Rewriter(placeholder, _bnode_numbers(statements))
    return sort_canonical(
        (
            rewriter.term(quad[3]) if quad[3] is not None else None,
            rewriter.term(quad[0]),
            rewriter.term(quad[1]),
            rewriter.term(quad[2]),
        )
        for quad in statements
    )


def sort_canonical(sequence: Iterable[CanonicalStatement]) -> tuple[CanonicalStatement, ...]:
    """Deduplicate and order canonical statements."""
    return tuple(sorted(set(sequence), key=_sort_key))


def digest_string(sequence: Iterable[CanonicalStatement]) -> str:
    """The exact text that is hashed for content addressing and signed."""
    lines: list[str] = []
    for context, subject, predicate, obj in sequence:
        lines.append(_term_line(context))
        lines.append(_term_line(subject))
        lines.append(_term_line(predicate))
        lines.append(_term_line(obj))
    return "".join(lines)


def compute_artifact_code(sequence: Iterable[CanonicalStatement]) -> str:
    """Artifact code of an already-canonical sequence."""
    digest = hashlib.sha256(digest_string(sequence).encode("utf-8")).digest()
    return MODULE_ID + base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


# ─── Internals ───────────────────────────────────────────────────


class _Rewriter:
    """Maps rdflib terms to canonical terms for one canonicalization pass."""

    def __init__(self, placeholder: str, bnodes: dict[BNode, int]) -> None:
        self._by_code = ":" not in placeholder and is_artifact_code(placeholder)
        self._placeholder = placeholder
        self._bnodes = bnodes

    def term(self, node: Node) -> Term:
        if isinstance(node, Literal):
            return _literal_term(node)
        if isinstance(node, BNode):
            number = self._bnodes[node]
            if self._by_code:
                return Term(TermKind.BNODE, str(number))
            return Term(TermKind.URI, trusty_uri(self._placeholder, CODE_PLACEHOLDER, f"..{number}"))
        if isinstance(node, URIRef):
            return Term(TermKind.URI, self._uri(str(node)))
        raise MalformedPublicationError(f"Unsupported RDF term: {node!r}")

    def _uri(self, uri: str) -> str:
        if self._by_code:
            return uri.replace(self._placeholder, CODE_PLACEHOLDER)
        if uri.startswith(self._placeholder):
            return trusty_uri(
                self._placeholder, CODE_PLACEHOLDER, uri[len(self._placeholder):],
            )
        return uri


_PAIR_PREDICATE = "urn:nanotrust:pair:"


def _relabel_bnodes(statements: list[Quad]) -> list[Quad]:
    """
    ``statements`` with blank nodes renamed by rdflib's canonical labelling.

    The labelling works on triples, so each (predicate, graph) pair is folded
    into a stand-in predicate for the duration of the pass.
    """
    if not any(isinstance(node, BNode) for quad in statements for node in quad):
        return statements

    pairs = sorted(
        {(quad[1], quad[3]) for quad in statements},
        key=lambda pair: (str(pair[0]), "" if pair[1] is None else str(pair[1])),
    )
    stand_in = {pair: URIRef(f"{_PAIR_PREDICATE}{index}") for index, pair in enumerate(pairs)}
    pair_of = {predicate: pair for pair, predicate in stand_in.items()}

    graph = Graph()
    for subject, predicate, obj, context in statements:
        graph.add((subject, stand_in[(predicate, context)], obj))
    return [
        (subject, pair_of[predicate][0], obj, pair_of[predicate][1])
        for subject, predicate, obj in to_canonical_graph(graph).triples((None, None, None))
    ]


def _bnode_numbers(statements: list[Quad]) -> dict[BNode, int]:
    labels = sorted({node for quad in statements for node in quad if isinstance(node, BNode)}, key=str)
    return {node: number for number, node in enumerate(labels, start=1)}


def _literal_term(literal: Literal) -> Term:
    if literal.language:
        return Term(TermKind.LITERAL, str(literal), language=literal.language.lower())
    datatype = str(literal.datatype) if literal.datatype is not None else str(XSD.string)
    return Term(TermKind.LITERAL, str(literal), datatype=datatype)


def _sort_key(statement: CanonicalStatement) -> tuple[Term, Term, Term, Term]:
    context, subject, predicate, obj = statement
    return (context or _NO_CONTEXT, subject, predicate, obj)


def _escape(label: str) -> str:
    return label.replace("\\", "\\\\").replace("\n", "\\n")


def _term_line(term: Term | None) -> str:
    if term is None:
        return "\n"
    if term.kind is TermKind.URI:
        return term.value + "\n"
    if term.kind is TermKind.BNODE:
        return "_:" + term.value + "\n"
    if term.language:
        return "@" + term.language + " " + _escape(term.value) + "\n"
    return "^" + term.datatype + " " + _escape(term.value) + "\n"
