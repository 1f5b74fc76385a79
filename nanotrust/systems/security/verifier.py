"""
nanotrust — Signature Verifier

Checks a resolved signature element against the canonical content of the
publication it belongs to.
"""

from __future__ import annotations

import structlog

from nanotrust.errors import MalformedPublicationError
from nanotrust.primitives.signature import SignatureElement
from nanotrust.systems.security.algorithms import SignatureAlgorithm
from nanotrust.systems.security.keys import decode_public_key
from nanotrust.systems.trusty.canonical import canonicalize, digest_string
from nanotrust.systems.trusty.codes import get_artifact_code

logger = structlog.get_logger("nanotrust.systems.security.verifier")


def verify(element: SignatureElement) -> bool:
    """
    True if the element's signature is valid for its target statements.

    Steps:
      1. Take the artifact code from the owning publication's URI
      2. Canonicalize the target statements against that code
      3. Verify SHA256with<algorithm> over the digest string's UTF-8 bytes
         using the element's X.509 public key

    Raises CryptoError for an unsupported algorithm or an undecodable key,
    and MalformedPublicationError if the publication is not content-addressed.
    """
    code = get_artifact_code(str(element.publication_uri))
    if code is None:
        raise MalformedPublicationError(
            f"Not a content-addressed publication: {element.publication_uri}"
        )

    algorithm = SignatureAlgorithm.from_tag(element.algorithm)
    public_key = decode_public_key(element.public_key, algorithm)
    digest = digest_string(canonicalize(element.target_statements, code))

    valid = algorithm.verify(public_key, element.signature, digest.encode("utf-8"))
    if not valid:
        logger.warning(
            "signature_verification_failed",
            publication=str(element.publication_uri),
            key_prefix=element.public_key[:40],
        )
    return valid
