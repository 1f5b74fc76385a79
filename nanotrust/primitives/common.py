"""
nanotrust — Common Primitives

Shared vocabulary, type aliases, base classes, and utilities used across
all systems.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from pydantic import BaseModel
from rdflib import BNode, Literal, Namespace, URIRef
from rdflib.namespace import RDF, XSD


def new_id() -> str:
    """Generate a new random identifier: 32 lowercase hex digits."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


# ─── Vocabulary ───────────────────────────────────────────────────

NP = Namespace("http://www.nanopub.org/nschema#")
NPX = Namespace("http://purl.org/nanopub/x/")
PROV = Namespace("http://www.w3.org/ns/prov#")
DCT = Namespace("http://purl.org/dc/terms/")

# Signature element predicates
HAS_SIGNATURE_ELEMENT = NPX.hasSignatureElement  # legacy format only
HAS_SIGNATURE_TARGET = NPX.hasSignatureTarget
HAS_SIGNATURE = NPX.hasSignature
HAS_PUBLIC_KEY = NPX.hasPublicKey
HAS_ALGORITHM = NPX.hasAlgorithm
SIGNED_BY = NPX.signedBy

# Provisional URIs are minted under this namespace until finalization
TEMP_NAMESPACE = "http://purl.org/nanopub/temp/"

DEFAULT_NAMESPACES: dict[str, str] = {
    "rdf": str(RDF),
    "xsd": str(XSD),
    "np": str(NP),
    "npx": str(NPX),
    "prov": str(PROV),
    "dct": str(DCT),
}


# ─── Statements ───────────────────────────────────────────────────

Node = Union[URIRef, BNode, Literal]
Resource = Union[URIRef, BNode]

# (subject, predicate, object, context)
Quad = Tuple[Resource, URIRef, Node, Optional[URIRef]]


def format_node(node: Node | None) -> str:
    """Short human-readable rendering of a term for log and error messages."""
    if node is None:
        return "<default graph>"
    return node.n3()


# ─── Base Models ──────────────────────────────────────────────────


class NanoBaseModel(BaseModel):
    """Base model for all nanotrust primitives. Immutable, rdflib terms allowed."""

    model_config = {
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
        "frozen": True,
    }
