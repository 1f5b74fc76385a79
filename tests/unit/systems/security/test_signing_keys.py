"""
Unit tests for signature algorithms and key material.

Tests algorithm lookup, the sign/verify primitives, public key encoding,
and PEM persistence of key pairs.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from nanotrust.config import SigningConfig
from nanotrust.errors import CryptoError
from nanotrust.systems.security.algorithms import SignatureAlgorithm
from nanotrust.systems.security.keys import (
    decode_public_key,
    encode_public_key,
    load_key_pair,
    load_or_generate_key_pair,
    save_key_pair,
)


# ─── Algorithm Lookup ───────────────────────────────────────────


class TestAlgorithmLookup:
    def test_tags_are_case_insensitive(self):
        assert SignatureAlgorithm.from_tag("rsa") is SignatureAlgorithm.RSA
        assert SignatureAlgorithm.from_tag(" DSA ") is SignatureAlgorithm.DSA

    def test_unknown_tag(self):
        with pytest.raises(CryptoError, match="Unsupported signature algorithm"):
            SignatureAlgorithm.from_tag("ECDSA")

    def test_scheme_names(self):
        assert SignatureAlgorithm.RSA.scheme == "SHA256withRSA"
        assert SignatureAlgorithm.DSA.scheme == "SHA256withDSA"


# ─── Primitives ─────────────────────────────────────────────────


class TestPrimitives:
    @pytest.mark.parametrize("algorithm", [SignatureAlgorithm.RSA, SignatureAlgorithm.DSA])
    def test_sign_then_verify(self, algorithm, rsa_keys, dsa_keys):
        keys = rsa_keys if algorithm is SignatureAlgorithm.RSA else dsa_keys
        signature = algorithm.sign(keys.private_key, b"digest")
        assert algorithm.verify(keys.public_key, signature, b"digest")
        assert not algorithm.verify(keys.public_key, signature, b"other digest")

    def test_mismatched_private_key(self, dsa_keys):
        with pytest.raises(CryptoError, match="needs a RSA private key"):
            SignatureAlgorithm.RSA.sign(dsa_keys.private_key, b"digest")

    def test_mismatched_public_key(self, rsa_keys):
        with pytest.raises(CryptoError, match="needs a DSA public key"):
            SignatureAlgorithm.DSA.verify(rsa_keys.public_key, b"sig", b"digest")


# ─── Public Key Encoding ────────────────────────────────────────


class TestPublicKeyEncoding:
    def test_encode_decode(self, rsa_keys):
        text = encode_public_key(rsa_keys.public_key)
        decoded = decode_public_key(text, SignatureAlgorithm.RSA)
        assert decoded.public_numbers() == rsa_keys.public_key.public_numbers()

    def test_encoding_has_no_whitespace(self, dsa_keys):
        text = encode_public_key(dsa_keys.public_key)
        assert "".join(text.split()) == text

    def test_whitespace_is_tolerated_on_decode(self, rsa_keys):
        text = encode_public_key(rsa_keys.public_key)
        wrapped = "\n".join(text[i:i + 64] for i in range(0, len(text), 64))
        decoded = decode_public_key(wrapped, SignatureAlgorithm.RSA)
        assert decoded.public_numbers() == rsa_keys.public_key.public_numbers()

    def test_not_base64(self):
        with pytest.raises(CryptoError):
            decode_public_key("%%%", SignatureAlgorithm.RSA)

    def test_wrong_key_type(self, rsa_keys):
        with pytest.raises(CryptoError):
            decode_public_key(encode_public_key(rsa_keys.public_key), SignatureAlgorithm.DSA)


# ─── Persistence ────────────────────────────────────────────────


class TestKeyPersistence:
    def test_save_and_reload(self, tmp_path, rsa_keys):
        key_path = tmp_path / "keys" / "signing.pem"
        public_path = save_key_pair(rsa_keys, key_path)

        assert key_path.exists()
        assert public_path == tmp_path / "keys" / "signing.pem.pub"
        assert public_path.read_text().startswith("-----BEGIN PUBLIC KEY-----")

        reloaded = load_key_pair(key_path)
        assert reloaded.public_key.public_numbers() == rsa_keys.public_key.public_numbers()

    def test_unreadable_key_file(self, tmp_path):
        key_path = tmp_path / "garbage.pem"
        key_path.write_text("not a key")
        with pytest.raises(CryptoError, match="Cannot load private key"):
            load_key_pair(key_path)

    def test_unsupported_key_type(self, tmp_path):
        key_path = tmp_path / "ed25519.pem"
        key_path.write_bytes(
            Ed25519PrivateKey.generate().private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        with pytest.raises(CryptoError, match="must be RSA or DSA"):
            load_key_pair(key_path)


class TestConfiguredKey:
    def test_generates_and_persists_when_missing(self, tmp_path):
        key_path = tmp_path / "signing.pem"
        config = SigningConfig(algorithm="RSA", private_key_path=str(key_path), key_size=2048)

        generated = load_or_generate_key_pair(config)
        assert key_path.exists()

        reloaded = load_or_generate_key_pair(config)
        assert reloaded.public_key.public_numbers() == generated.public_key.public_numbers()

    def test_stored_key_must_fit_algorithm(self, tmp_path, rsa_keys):
        key_path = tmp_path / "signing.pem"
        save_key_pair(rsa_keys, key_path)
        with pytest.raises(CryptoError):
            load_or_generate_key_pair(SigningConfig(algorithm="DSA", private_key_path=str(key_path)))
