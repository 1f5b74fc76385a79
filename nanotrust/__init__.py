"""
nanotrust — Trust layer for nanopublications.

Resolve, verify and create publication signatures, and retrieve
content-addressed publications from untrusted servers.
"""

from nanotrust.errors import (
    CryptoError,
    InvalidIdentifierError,
    MalformedPublicationError,
    MalformedSignatureError,
    MultipleSignatureElementsError,
    NanotrustError,
    PublicationParseError,
    WrongArtifactTypeError,
)
from nanotrust.primitives import Publication, SignatureElement
from nanotrust.systems.retrieval import retrieve
from nanotrust.systems.security import (
    KeyPair,
    SignatureAlgorithm,
    looks_signed,
    resolve_signature,
    sign,
    verify,
)

__version__ = "0.1.0"

__all__ = [
    "CryptoError",
    "InvalidIdentifierError",
    "KeyPair",
    "MalformedPublicationError",
    "MalformedSignatureError",
    "MultipleSignatureElementsError",
    "NanotrustError",
    "Publication",
    "PublicationParseError",
    "SignatureAlgorithm",
    "SignatureElement",
    "WrongArtifactTypeError",
    "looks_signed",
    "resolve_signature",
    "retrieve",
    "sign",
    "verify",
]
