"""
nanotrust — Finalization and Self-Certification

Finalization is the second phase of the two-phase content-addressing
protocol: content is first canonicalized against a provisional URI (with a
placeholder where the code goes), then the code is computed over that frozen
content and written into every self-reference.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog
from rdflib import Literal, URIRef
from rdflib.namespace import XSD

from nanotrust.errors import MalformedPublicationError
from nanotrust.primitives.common import Node, Quad
from nanotrust.primitives.publication import Publication
from nanotrust.systems.trusty.canonical import (
    CanonicalStatement,
    Term,
    TermKind,
    canonicalize,
    compute_artifact_code,
    sort_canonical,
)
from nanotrust.systems.trusty.codes import (
    CODE_PLACEHOLDER,
    get_artifact_code,
    has_module_prefix,
    trusty_uri,
)

logger = structlog.get_logger("nanotrust.systems.trusty.transform")


def finalize(
    statements: Iterable[Quad],
    provisional_uri: str,
    namespaces: Mapping[str, str] | None = None,
) -> Publication:
    """
    Content-address a statement set whose self-references use ``provisional_uri``.

    Raises MalformedPublicationError if the result is not a valid publication.
    """
    sequence = canonicalize(statements, str(provisional_uri))
    return finalize_canonical(sequence, provisional_uri, namespaces)


def finalize_canonical(
    sequence: Iterable[CanonicalStatement],
    provisional_uri: str,
    namespaces: Mapping[str, str] | None = None,
) -> Publication:
    """
    Finalize an already-canonical sequence.

    The sequence may be the union of separately canonicalized parts; it is
    re-sorted before the code is computed.
    """
    frozen = sort_canonical(sequence)
    code = compute_artifact_code(frozen)

    quads: list[Quad] = []
    for context, subject, predicate, obj in frozen:
        quads.append((
            _to_node(subject, code),
            _to_node(predicate, code),
            _to_node(obj, code),
            _to_node(context, code) if context is not None else None,
        ))

    rewritten_ns = {
        prefix: _rewrite_namespace(uri, str(provisional_uri), code)
        for prefix, uri in (namespaces or {}).items()
    }

    publication = Publication.from_quads(quads, rewritten_ns)
    logger.debug(
        "publication_finalized",
        provisional_uri=str(provisional_uri),
        uri=str(publication.uri),
        statements=len(publication),
    )
    return publication


def is_self_certifying(publication: Publication) -> bool:
    """
    True if the publication's URI carries an RA code that its own content
    reproduces.
    """
    code = get_artifact_code(str(publication.uri))
    if code is None or not has_module_prefix(code):
        return False
    recomputed = compute_artifact_code(canonicalize(publication.statements, code))
    return recomputed == code


def artifact_code_of(publication: Publication) -> str | None:
    """The artifact code claimed by the publication's URI, if any."""
    return get_artifact_code(str(publication.uri))


# ─── Internals ───────────────────────────────────────────────────


def _to_node(term: Term, code: str) -> Node:
    if term.kind is TermKind.URI:
        return URIRef(term.value.replace(CODE_PLACEHOLDER, code))
    if term.kind is TermKind.LITERAL:
        if term.language:
            return Literal(term.value, lang=term.language)
        if term.datatype == str(XSD.string):
            return Literal(term.value)
        return Literal(term.value, datatype=URIRef(term.datatype))
    raise MalformedPublicationError(
        "Blank node left in canonical content; finalize against a provisional URI"
    )


def _rewrite_namespace(uri: str, base: str, code: str) -> str:
    if not uri.startswith(base):
        return uri
    suffix = uri[len(base):].lstrip("#")
    if not suffix:
        # Prefixed names under the publication itself become fragments
        return trusty_uri(base, code) + "#"
    return trusty_uri(base, code, suffix)
