"""
nanotrust — Signature Resolver

Extracts the signature element from a publication's pubinfo graph.

The element is the unique subject of a has-signature-target statement that
points at the publication itself. Everything in the publication except the
has-signature statement is part of the signed target set.
"""

from __future__ import annotations

import base64
import binascii

import structlog
from rdflib import Literal, URIRef

from nanotrust.errors import MalformedSignatureError, MultipleSignatureElementsError
from nanotrust.primitives.common import (
    HAS_ALGORITHM,
    HAS_PUBLIC_KEY,
    HAS_SIGNATURE,
    HAS_SIGNATURE_ELEMENT,
    HAS_SIGNATURE_TARGET,
    SIGNED_BY,
    Node,
    Quad,
    format_node,
)
from nanotrust.primitives.publication import Publication
from nanotrust.primitives.signature import SignatureElement

logger = structlog.get_logger("nanotrust.systems.security.resolver")

_SIGNATURE_PREDICATES = frozenset({
    HAS_SIGNATURE_ELEMENT,
    HAS_SIGNATURE_TARGET,
    HAS_SIGNATURE,
    HAS_PUBLIC_KEY,
})


def resolve_signature(publication: Publication) -> SignatureElement | None:
    """
    Return the publication's signature element, or None if it is unsigned.

    Raises MultipleSignatureElementsError if more than one element targets
    the publication, and MalformedSignatureError for mistyped, duplicated or
    missing signature fields.
    """
    element_uri = _signature_element_uri(publication)
    if element_uri is None:
        return None

    targets: list[Quad] = [*publication.head, *publication.assertion, *publication.provenance]
    signature: bytes | None = None
    algorithm: str | None = None
    public_key: str | None = None
    signers: list[URIRef] = []

    for quad in publication.pubinfo:
        subject, predicate, obj, _ = quad
        if subject != element_uri:
            targets.append(quad)
            continue

        if predicate == HAS_SIGNATURE:
            # The signature cannot sign itself
            if signature is not None:
                raise MalformedSignatureError("Multiple signature values", field="signature")
            signature = _decode_signature(_literal(obj, "signature"))
            continue

        targets.append(quad)
        if predicate == HAS_PUBLIC_KEY:
            if public_key is not None:
                raise MalformedSignatureError("Multiple public keys", field="public_key")
            public_key = str(_literal(obj, "public_key"))
        elif predicate == HAS_ALGORITHM:
            if algorithm is not None:
                raise MalformedSignatureError("Multiple algorithms", field="algorithm")
            algorithm = str(_literal(obj, "algorithm"))
        elif predicate == SIGNED_BY:
            if not isinstance(obj, URIRef):
                raise MalformedSignatureError(
                    f"URI expected as signer: {format_node(obj)}", field="signed_by",
                )
            signers.append(obj)
        # Other statements about the element are signed but not interpreted

    if signature is None:
        raise MalformedSignatureError("Signature element without signature", field="signature")
    if algorithm is None:
        raise MalformedSignatureError("Signature element without algorithm", field="algorithm")
    if public_key is None:
        # TODO: accept a public key fingerprint once a key lookup collaborator exists
        raise MalformedSignatureError("Signature element without public key", field="public_key")

    logger.debug(
        "signature_element_resolved",
        publication=str(publication.uri),
        element=str(element_uri),
        algorithm=algorithm,
        signers=len(signers),
    )
    return SignatureElement(
        publication_uri=publication.uri,
        uri=element_uri,
        signature=signature,
        algorithm=algorithm,
        public_key=public_key,
        signers=tuple(signers),
        target_statements=tuple(targets),
    )


def looks_signed(publication: Publication) -> bool:
    """
    Best-effort probe that also matches legacy signature formats.

    May produce false positives. Never use it to decide whether to trust a
    publication; use resolve_signature and verify for that.
    """
    return any(quad[1] in _SIGNATURE_PREDICATES for quad in publication.pubinfo)


# ─── Internals ───────────────────────────────────────────────────


def _signature_element_uri(publication: Publication) -> URIRef | None:
    subjects = []
    for subject, predicate, obj, _ in publication.pubinfo:
        if predicate != HAS_SIGNATURE_TARGET or obj != publication.uri:
            continue
        if not isinstance(subject, URIRef):
            raise MalformedSignatureError(
                "Signature element must be identified by URI", field="signature_element",
            )
        if subject not in subjects:
            subjects.append(subject)
    if len(subjects) > 1:
        raise MultipleSignatureElementsError(
            "Multiple signature elements found: " + ", ".join(str(s) for s in subjects)
        )
    return subjects[0] if subjects else None


def _literal(obj: Node, field: str) -> Literal:
    if not isinstance(obj, Literal):
        raise MalformedSignatureError(
            f"Literal expected as {field.replace('_', ' ')}: {format_node(obj)}",
            field=field,
        )
    return obj


def _decode_signature(literal: Literal) -> bytes:
    try:
        return base64.b64decode("".join(str(literal).split()), validate=True)
    except binascii.Error as exc:
        raise MalformedSignatureError(
            f"Signature is not valid base64: {exc}", field="signature",
        ) from exc
