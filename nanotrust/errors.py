"""
nanotrust — Error Hierarchy

All exceptions raised by the trust layer.

Severity guide:
  MalformedSignatureError   signature metadata is missing, duplicated or mistyped
  CryptoError               algorithm, key or primitive failure
  InvalidIdentifierError    caller-supplied identifier does not parse
  MalformedPublicationError publication content fails structural checks

Per-candidate retrieval failures are never raised to the caller; the
retriever logs and discards them.
"""

from __future__ import annotations


class NanotrustError(RuntimeError):
    """Base for all trust-layer errors."""


class MalformedSignatureError(NanotrustError):
    """
    The signature description embedded in pubinfo is structurally unusable.

    ``field`` names the offending signature attribute when there is one.
    """

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class MultipleSignatureElementsError(MalformedSignatureError):
    """More than one signature element targets the same publication."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="signature_element")


class CryptoError(NanotrustError):
    """Unsupported algorithm, corrupt key encoding or primitive failure."""


class InvalidIdentifierError(NanotrustError, ValueError):
    """A publication URI or artifact code is not syntactically well-formed."""


class WrongArtifactTypeError(InvalidIdentifierError):
    """The artifact code does not carry the module prefix of this publication type."""


class MalformedPublicationError(NanotrustError):
    """Fetched, parsed or finalized content is not a valid publication."""


class PublicationParseError(MalformedPublicationError):
    """The RDF payload itself could not be parsed."""
