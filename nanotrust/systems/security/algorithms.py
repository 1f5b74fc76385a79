"""
nanotrust — Signature Algorithms

A closed set of supported algorithms, each mapped explicitly to its
cryptography primitive. Signatures are always over SHA-256; the scheme name
is "SHA256with" + tag, e.g. SHA256withRSA.
"""

from __future__ import annotations

import enum
from typing import Any

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, padding, rsa

from nanotrust.errors import CryptoError


class SignatureAlgorithm(str, enum.Enum):
    RSA = "RSA"
    DSA = "DSA"

    @classmethod
    def from_tag(cls, tag: str) -> SignatureAlgorithm:
        """Look up an algorithm by its literal tag. Unknown tags are a CryptoError."""
        try:
            return cls(tag.strip().upper())
        except ValueError as exc:
            raise CryptoError(f"Unsupported signature algorithm: {tag!r}") from exc

    @property
    def scheme(self) -> str:
        return "SHA256with" + self.value

    # ─── Key type checks ────────────────────────────────────────────

    def check_private_key(self, key: Any) -> None:
        expected = rsa.RSAPrivateKey if self is SignatureAlgorithm.RSA else dsa.DSAPrivateKey
        if not isinstance(key, expected):
            raise CryptoError(
                f"{self.scheme} needs a {self.value} private key, got {type(key).__name__}"
            )

    def check_public_key(self, key: Any) -> None:
        expected = rsa.RSAPublicKey if self is SignatureAlgorithm.RSA else dsa.DSAPublicKey
        if not isinstance(key, expected):
            raise CryptoError(
                f"{self.scheme} needs a {self.value} public key, got {type(key).__name__}"
            )

    # ─── Primitives ─────────────────────────────────────────────────

    def sign(self, private_key: Any, data: bytes) -> bytes:
        """Sign ``data`` under this scheme. Raises CryptoError on any failure."""
        self.check_private_key(private_key)
        try:
            if self is SignatureAlgorithm.RSA:
                return private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
            return private_key.sign(data, hashes.SHA256())
        except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
            raise CryptoError(f"{self.scheme} signing failed: {exc}") from exc

    def verify(self, public_key: Any, signature: bytes, data: bytes) -> bool:
        """
        Check ``signature`` over ``data``.

        A signature that simply does not match returns False; a primitive
        failure raises CryptoError.
        """
        self.check_public_key(public_key)
        try:
            if self is SignatureAlgorithm.RSA:
                public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
            else:
                public_key.verify(signature, data, hashes.SHA256())
        except InvalidSignature:
            return False
        except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
            raise CryptoError(f"{self.scheme} verification failed: {exc}") from exc
        return True
