"""
nanotrust — Signatures

Resolution, verification and creation of publication signatures.
"""

from nanotrust.systems.security.algorithms import SignatureAlgorithm
from nanotrust.systems.security.keys import (
    KeyPair,
    generate_key_pair,
    load_key_pair,
    load_or_generate_key_pair,
    save_key_pair,
)
from nanotrust.systems.security.resolver import looks_signed, resolve_signature
from nanotrust.systems.security.signer import sign
from nanotrust.systems.security.verifier import verify

__all__ = [
    "KeyPair",
    "SignatureAlgorithm",
    "generate_key_pair",
    "load_key_pair",
    "load_or_generate_key_pair",
    "looks_signed",
    "resolve_signature",
    "save_key_pair",
    "sign",
    "verify",
]
