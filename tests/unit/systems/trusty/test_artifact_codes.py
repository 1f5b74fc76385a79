"""
Unit tests for artifact code syntax and content-addressed URI construction.
"""

from __future__ import annotations

from nanotrust.systems.trusty.codes import (
    CODE_LENGTH,
    expand_base,
    get_artifact_code,
    has_module_prefix,
    is_artifact_code,
    is_potential_trusty_uri,
    trusty_uri,
)

CODE = "RA" + "q2P3suae730r_PPkfdmBhBIpqNO6763sJ0yMQWm6xVg"


# ─── Code Syntax ────────────────────────────────────────────────


class TestArtifactCodeSyntax:
    def test_code_length(self):
        assert len(CODE) == CODE_LENGTH == 45

    def test_bare_code_is_artifact_code(self):
        assert is_artifact_code(CODE)

    def test_short_or_punctuated_strings_are_not_codes(self):
        assert not is_artifact_code("RAabc")
        assert not is_artifact_code(CODE[:-1] + "!")
        assert not is_artifact_code("http://purl.org/np/" + CODE)

    def test_module_prefix(self):
        assert has_module_prefix(CODE)
        assert not has_module_prefix("RB" + CODE[2:])
        assert not has_module_prefix(CODE + "A")


# ─── Code Extraction ────────────────────────────────────────────


class TestGetArtifactCode:
    def test_from_plain_uri(self):
        assert get_artifact_code("http://purl.org/np/" + CODE) == CODE

    def test_fragment_is_ignored(self):
        assert get_artifact_code("http://purl.org/np/" + CODE + "#assertion") == CODE

    def test_short_extension_is_ignored(self):
        assert get_artifact_code("https://np.example.org/" + CODE + ".trig") == CODE

    def test_uri_without_code(self):
        assert get_artifact_code("http://example.org/thing") is None
        assert get_artifact_code("http://purl.org/nanopub/temp/01hq3v7xg0sn3kfm0n6cvnycz0/") is None

    def test_potential_trusty_uri_needs_a_scheme(self):
        assert is_potential_trusty_uri("http://purl.org/np/" + CODE)
        assert not is_potential_trusty_uri(CODE)
        assert not is_potential_trusty_uri("http://example.org/thing")


# ─── URI Construction ───────────────────────────────────────────


class TestTrustyUri:
    def test_expand_base(self):
        assert expand_base("http://example.org/np/") == "http://example.org/np/"
        assert expand_base("http://example.org/np#") == "http://example.org/np."
        assert expand_base("http://example.org/np") == "http://example.org/np."

    def test_bare_publication_uri(self):
        assert trusty_uri("http://example.org/np/", CODE) == "http://example.org/np/" + CODE

    def test_suffix_becomes_fragment(self):
        uri = trusty_uri("http://example.org/np/", CODE, "assertion")
        assert uri == "http://example.org/np/" + CODE + "#assertion"

    def test_leading_hash_in_suffix_is_dropped(self):
        uri = trusty_uri("http://example.org/np/", CODE, "#sig")
        assert uri == "http://example.org/np/" + CODE + "#sig"

    def test_inner_hash_is_escaped(self):
        uri = trusty_uri("http://example.org/np/", CODE, "a#b")
        assert uri.endswith("#a%23b")

    def test_skolem_suffix_is_appended_directly(self):
        uri = trusty_uri("http://example.org/np/", CODE, "..3")
        assert uri == "http://example.org/np/" + CODE + "..3"
