"""
nanotrust — Content Addressing

Identifier syntax, canonical form, digest, and the two-phase finalization
that embeds a content hash into a publication's own URI.
"""

from nanotrust.systems.trusty.canonical import (
    canonicalize,
    compute_artifact_code,
    digest_string,
)
from nanotrust.systems.trusty.codes import (
    MODULE_ID,
    get_artifact_code,
    is_artifact_code,
    is_potential_trusty_uri,
)
from nanotrust.systems.trusty.transform import (
    finalize,
    finalize_canonical,
    is_self_certifying,
)

__all__ = [
    "MODULE_ID",
    "canonicalize",
    "compute_artifact_code",
    "digest_string",
    "finalize",
    "finalize_canonical",
    "get_artifact_code",
    "is_artifact_code",
    "is_potential_trusty_uri",
    "is_self_certifying",
]
