"""
nanotrust — Signature Element Primitive

The pubinfo-embedded description of a digital signature. A publication
carries at most one; it is never mutated. Verification reads it, signing
synthesizes a new one under a fresh element URI.
"""

from __future__ import annotations

from rdflib import URIRef

from nanotrust.primitives.common import NanoBaseModel, Quad


class SignatureElement(NanoBaseModel):
    """
    A resolved signature element.

    ``target_statements`` holds every statement that contributed to the
    signed digest: the whole publication except the has-signature
    statement itself.
    """

    publication_uri: URIRef
    uri: URIRef
    signature: bytes
    algorithm: str
    public_key: str
    signers: tuple[URIRef, ...] = ()
    target_statements: tuple[Quad, ...] = ()
