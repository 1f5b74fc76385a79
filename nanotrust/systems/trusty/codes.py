"""
nanotrust — Artifact Codes

Syntax of content-addressed identifiers. An artifact code is a two-letter
module id followed by an unpadded URL-safe base64 hash; a content-addressed
URI carries the code at its tail, optionally followed by a fragment.
"""

from __future__ import annotations

import re

# RDF graph content, SHA-256, as in "RA" trusty URIs
MODULE_ID = "RA"
HASH_LENGTH = 43
CODE_LENGTH = len(MODULE_ID) + HASH_LENGTH

# Placeholder written in place of the code while content is canonicalized.
# URIs cannot contain a space, so substitution back to the code is lossless.
CODE_PLACEHOLDER = " "

_CODE_RE = re.compile(r"[A-Za-z0-9_\-]{25,}")
_URI_TAIL_RE = re.compile(
    r"^.*[^A-Za-z0-9_\-]([A-Za-z0-9_\-]{25,})(\.[A-Za-z0-9_\-]{0,20})?$"
)


def is_artifact_code(value: str) -> bool:
    """True if ``value`` is syntactically a bare artifact code."""
    return _CODE_RE.fullmatch(value) is not None


def get_artifact_code(uri: str) -> str | None:
    """
    Extract the trailing artifact code from a URI.

    The fragment is ignored, as is a short file extension. Returns None when
    the URI does not look content-addressed.
    """
    base = uri.split("#", 1)[0]
    match = _URI_TAIL_RE.match(base)
    if match is None:
        return None
    return match.group(1)


def is_potential_trusty_uri(uri: str) -> bool:
    """True if the URI has the syntactic shape of a content-addressed URI."""
    return ":" in uri and get_artifact_code(uri) is not None


def has_module_prefix(code: str) -> bool:
    return code.startswith(MODULE_ID) and len(code) == CODE_LENGTH


# ─── URI construction ────────────────────────────────────────────


def expand_base(base: str) -> str:
    """The string the artifact code is appended to for a given base URI."""
    if base.endswith("/"):
        return base
    if base.endswith("#"):
        return base[:-1] + "."
    return base + "."


def trusty_uri(base: str, code: str, suffix: str = "") -> str:
    """
    Build the URI that ``base + suffix`` becomes once ``code`` is known.

    Skolemized blank-node suffixes (``..n``) are appended directly; any other
    suffix becomes a fragment.
    """
    uri = expand_base(base) + code
    if suffix.startswith("#"):
        suffix = suffix[1:]
    if not suffix:
        return uri
    if suffix.startswith(".."):
        return uri + suffix
    return uri + "#" + suffix.replace("#", "%23")
