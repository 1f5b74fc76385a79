"""
nanotrust — Signature Creator

Produces a signed, content-addressed publication from an unsigned one that
still carries its provisional URI.

The signed content nominally contains its own, not yet known identifier, so
signing runs in two phases:

  1. Add the signature element (target, public key, algorithm, signer) to
     pubinfo and canonicalize everything against the provisional URI.
  2. Sign the digest of that canonical content, canonicalize the lone
     has-signature statement the same way, merge, and hand the frozen result
     to finalization, which computes the real artifact code and rewrites
     every self-reference.

The verifier later canonicalizes against the artifact code and arrives at
exactly the sequence signed in phase 1.
"""

from __future__ import annotations

import base64

import structlog
from rdflib import Literal, URIRef

from nanotrust.errors import MalformedSignatureError
from nanotrust.primitives.common import (
    HAS_ALGORITHM,
    HAS_PUBLIC_KEY,
    HAS_SIGNATURE,
    HAS_SIGNATURE_TARGET,
    NPX,
    SIGNED_BY,
    Quad,
)
from nanotrust.primitives.publication import Publication
from nanotrust.systems.security.algorithms import SignatureAlgorithm
from nanotrust.systems.security.keys import KeyPair, encode_public_key
from nanotrust.systems.security.resolver import resolve_signature
from nanotrust.systems.trusty.canonical import canonicalize, digest_string
from nanotrust.systems.trusty.transform import finalize_canonical

logger = structlog.get_logger("nanotrust.systems.security.signer")

SIGNATURE_ELEMENT_SUFFIX = "sig"


def sign(
    publication: Publication,
    algorithm: SignatureAlgorithm | str,
    key_pair: KeyPair,
    signer: URIRef | str | None = None,
) -> Publication:
    """
    Return a new, finalized publication carrying a signature over ``publication``.

    Raises MalformedSignatureError if the input is already signed, CryptoError
    for an unsupported algorithm or a key that does not fit it, and
    MalformedPublicationError if finalization yields an invalid publication.
    """
    if not isinstance(algorithm, SignatureAlgorithm):
        algorithm = SignatureAlgorithm.from_tag(algorithm)
    algorithm.check_private_key(key_pair.private_key)

    if resolve_signature(publication) is not None:
        raise MalformedSignatureError(
            f"Publication is already signed: {publication.uri}", field="signature_element",
        )

    np_uri = publication.uri
    pubinfo_uri = publication.pubinfo_uri
    provisional = str(np_uri)
    element_uri = URIRef(provisional + SIGNATURE_ELEMENT_SUFFIX)

    statements: list[Quad] = publication.statements
    statements.append((element_uri, HAS_SIGNATURE_TARGET, np_uri, pubinfo_uri))
    statements.append((
        element_uri, HAS_PUBLIC_KEY, Literal(encode_public_key(key_pair.public_key)), pubinfo_uri,
    ))
    statements.append((element_uri, HAS_ALGORITHM, Literal(algorithm.value), pubinfo_uri))
    if signer is not None:
        statements.append((element_uri, SIGNED_BY, URIRef(signer), pubinfo_uri))

    # Phase 1: the content covered by the signature, against the provisional URI
    covered = canonicalize(statements, provisional)
    signature = algorithm.sign(
        key_pair.private_key, digest_string(covered).encode("utf-8"),
    )
    signature_literal = Literal(base64.b64encode(signature).decode("ascii"))

    # Phase 2: the signature statement in the same canonical form, then finalize
    signature_statement = canonicalize(
        [(element_uri, HAS_SIGNATURE, signature_literal, pubinfo_uri)], provisional,
    )[0]

    namespaces = dict(publication.namespaces)
    namespaces["npx"] = str(NPX)

    signed = finalize_canonical((*covered, signature_statement), provisional, namespaces)
    logger.info(
        "publication_signed",
        provisional_uri=provisional,
        uri=str(signed.uri),
        algorithm=algorithm.scheme,
        signer=str(signer) if signer is not None else None,
    )
    return signed
