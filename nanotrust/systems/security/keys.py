"""
nanotrust — Key Material

Generation, persistence and encoding of signing key pairs. Public keys travel
inside publications as base64 X.509 SubjectPublicKeyInfo DER, with all
whitespace stripped.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from nanotrust.errors import CryptoError
from nanotrust.systems.security.algorithms import SignatureAlgorithm

if TYPE_CHECKING:
    from nanotrust.config import SigningConfig

logger = structlog.get_logger("nanotrust.systems.security.keys")


class KeyPair(NamedTuple):
    private_key: Any
    public_key: Any

    @classmethod
    def from_private_key(cls, private_key: Any) -> KeyPair:
        return cls(private_key, private_key.public_key())


def generate_key_pair(
    algorithm: SignatureAlgorithm = SignatureAlgorithm.RSA,
    key_size: int = 2048,
) -> KeyPair:
    """Generate a fresh key pair for ``algorithm``."""
    if algorithm is SignatureAlgorithm.RSA:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    else:
        private_key = dsa.generate_private_key(key_size=key_size)
    logger.info("key_pair_generated", algorithm=algorithm.value, key_size=key_size)
    return KeyPair.from_private_key(private_key)


def load_key_pair(path: str | Path, password: bytes | None = None) -> KeyPair:
    """Load a PEM private key from disk and derive its public half."""
    path = Path(path)
    try:
        private_key = serialization.load_pem_private_key(path.read_bytes(), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CryptoError(f"Cannot load private key from {path}: {exc}") from exc
    if not isinstance(private_key, (rsa.RSAPrivateKey, dsa.DSAPrivateKey)):
        raise CryptoError(
            f"Signing key must be RSA or DSA, got {type(private_key).__name__}"
        )
    logger.info("key_pair_loaded", path=str(path))
    return KeyPair.from_private_key(private_key)


def save_key_pair(key_pair: KeyPair, path: str | Path) -> Path:
    """
    Persist ``key_pair`` as ``path`` (PKCS#8 private PEM) and ``path.pub``
    (SubjectPublicKeyInfo PEM). Returns the public key path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        key_pair.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path = path.with_name(path.name + ".pub")
    public_path.write_bytes(
        key_pair.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    logger.info("key_pair_persisted", path=str(path))
    return public_path


# ─── Encoding ────────────────────────────────────────────────────


def encode_public_key(public_key: Any) -> str:
    """Base64 of the X.509 SubjectPublicKeyInfo DER encoding, no whitespace."""
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return "".join(base64.b64encode(der).decode("ascii").split())


def decode_public_key(text: str, algorithm: SignatureAlgorithm) -> Any:
    """Decode a base64 X.509 public key and check it fits ``algorithm``."""
    try:
        der = base64.b64decode("".join(text.split()), validate=True)
        public_key = serialization.load_der_public_key(der)
    except (binascii.Error, ValueError, UnsupportedAlgorithm) as exc:
        raise CryptoError(f"Public key is not a valid X.509 key: {exc}") from exc
    algorithm.check_public_key(public_key)
    return public_key


def load_or_generate_key_pair(config: SigningConfig) -> KeyPair:
    """
    The configured signing key: loaded from ``private_key_path`` if it exists,
    otherwise generated (and persisted there when a path is configured).
    """
    algorithm = SignatureAlgorithm.from_tag(config.algorithm)
    path = Path(config.private_key_path) if config.private_key_path else None
    if path is not None and path.exists():
        key_pair = load_key_pair(path)
        algorithm.check_private_key(key_pair.private_key)
        return key_pair

    key_pair = generate_key_pair(algorithm, config.key_size)
    if path is not None:
        save_key_pair(key_pair, path)
    return key_pair
