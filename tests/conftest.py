"""Shared fixtures for the nanotrust test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from rdflib import Literal, Namespace, URIRef

from nanotrust.primitives.common import PROV
from nanotrust.primitives.publication import Publication
from nanotrust.systems.assembly.creator import PublicationCreator
from nanotrust.systems.security.algorithms import SignatureAlgorithm
from nanotrust.systems.security.keys import KeyPair, generate_key_pair

EX = Namespace("http://example.org/")
FIXED_DT = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def rsa_keys() -> KeyPair:
    return generate_key_pair(SignatureAlgorithm.RSA, key_size=2048)


@pytest.fixture(scope="session")
def dsa_keys() -> KeyPair:
    return generate_key_pair(SignatureAlgorithm.DSA, key_size=2048)


@pytest.fixture
def make_unsigned():
    """Factory for unsigned publications under a fresh provisional URI."""

    def _make(label: str = "Alice", uri: str | None = None) -> Publication:
        creator = PublicationCreator(uri)
        creator.add_default_namespaces()
        creator.add_namespace("ex", str(EX))
        creator.add_assertion_statement(EX.alice, EX.name, Literal(label))
        creator.add_assertion_statement(EX.alice, EX.knows, EX.bob)
        creator.add_provenance_statement(PROV.wasAttributedTo, EX.lab)
        creator.add_creator(URIRef("https://orcid.org/0000-0002-1825-0097"))
        creator.add_timestamp(FIXED_DT)
        return creator.build()

    return _make
