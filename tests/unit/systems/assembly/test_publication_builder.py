"""
Unit tests for the streaming publication builder.

Tests the accumulator state machine step by step, then whole-stream builds.
"""

from __future__ import annotations

from datetime import datetime, timezone

from rdflib import Literal, Namespace, URIRef

from nanotrust.config import PublicationConfig
from nanotrust.primitives.common import DCT, PROV
from nanotrust.systems.assembly.builder import (
    BuildAccumulator,
    BuildOptions,
    BuildPhase,
    NamespaceEvent,
    build_publications,
    flush,
    step,
)
from nanotrust.systems.trusty.transform import is_self_certifying

EX = Namespace("http://example.org/")
ORCID = "https://orcid.org/0000-0002-1825-0097"
FIXED_DT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

ALICE_1 = (EX.alice, EX.knows, EX.bob)
ALICE_2 = (EX.alice, EX.name, Literal("Alice"))
BOB_1 = (EX.bob, EX.name, Literal("Bob"))


# ─── State Machine ──────────────────────────────────────────────


class TestStep:
    def test_first_statement_starts_accumulating(self):
        acc, closed = step(BuildAccumulator(), ALICE_1)
        assert closed is None
        assert acc.phase is BuildPhase.ACCUMULATING
        assert acc.subject == EX.alice
        assert acc.triples == (ALICE_1,)

    def test_same_subject_accumulates(self):
        acc, _ = step(BuildAccumulator(), ALICE_1)
        acc, closed = step(acc, ALICE_2)
        assert closed is None
        assert acc.triples == (ALICE_1, ALICE_2)

    def test_new_subject_closes_the_group(self):
        acc, _ = step(BuildAccumulator(), ALICE_1)
        acc, _ = step(acc, ALICE_2)
        acc, closed = step(acc, BOB_1)

        assert closed is not None
        assert closed.triples == (ALICE_1, ALICE_2)
        assert acc.phase is BuildPhase.ACCUMULATING
        assert acc.subject == EX.bob
        assert acc.triples == (BOB_1,)
        assert acc.pending is None

    def test_step_does_not_mutate(self):
        start = BuildAccumulator()
        step(start, ALICE_1)
        assert start == BuildAccumulator()

    def test_namespaces_survive_a_flush(self):
        acc, _ = step(BuildAccumulator(), NamespaceEvent("ex", str(EX)))
        acc, _ = step(acc, ALICE_1)
        acc, closed = step(acc, BOB_1)
        assert closed.namespaces == (("ex", str(EX)),)
        assert acc.namespaces == (("ex", str(EX)),)

    def test_end_of_stream_flushes(self):
        acc, _ = step(BuildAccumulator(), ALICE_1)
        acc, closed = step(acc, None)
        assert closed.triples == (ALICE_1,)
        assert acc.phase is BuildPhase.EMPTY

    def test_end_of_empty_stream(self):
        acc, closed = step(BuildAccumulator(), None)
        assert closed is None
        assert acc.phase is BuildPhase.EMPTY

    def test_flush_outside_ready_is_a_no_op(self):
        acc, _ = step(BuildAccumulator(), ALICE_1)
        assert flush(acc) == (acc, None)


# ─── Whole-Stream Builds ────────────────────────────────────────


class TestBuildPublications:
    def test_one_publication_per_subject_run(self):
        options = BuildOptions(creators=(ORCID,), timestamp=FIXED_DT)
        publications = list(build_publications([ALICE_1, ALICE_2, BOB_1], options))

        assert len(publications) == 2
        assert {q[:3] for q in publications[0].assertion} == {ALICE_1, ALICE_2}
        assert {q[:3] for q in publications[1].assertion} == {BOB_1}
        assert all(is_self_certifying(p) for p in publications)

    def test_empty_stream(self):
        assert list(build_publications([])) == []

    def test_provenance_defaults_to_primary_source(self):
        options = BuildOptions(creators=(ORCID,), timestamp=FIXED_DT)
        publication = next(build_publications([ALICE_1], options))

        assert (PROV.hadPrimarySource, URIRef(ORCID)) in {q[1:3] for q in publication.provenance}
        pubinfo = {q[1:3] for q in publication.pubinfo}
        assert (DCT.creator, URIRef(ORCID)) in pubinfo
        assert any(p == DCT.created for p, _ in pubinfo)

    def test_derived_from(self):
        source = "https://example.org/dataset.csv"
        options = BuildOptions(creators=(ORCID,), derived_from=source, timestamp=FIXED_DT)
        publication = next(build_publications([ALICE_1], options))
        assert {q[1:3] for q in publication.provenance} == {(PROV.wasDerivedFrom, URIRef(source))}

    def test_default_creator(self):
        publication = next(build_publications([ALICE_1], BuildOptions(timestamp=FIXED_DT)))
        creators = [q[2] for q in publication.pubinfo if q[1] == DCT.creator]
        assert creators == [URIRef(str(publication.uri) + "#creator")]

    def test_stream_namespaces_are_declared(self):
        events = [NamespaceEvent("ex", str(EX)), ALICE_1]
        publication = next(build_publications(events, BuildOptions(timestamp=FIXED_DT)))
        assert publication.namespaces["ex"] == str(EX)

    def test_temp_namespace(self):
        options = BuildOptions(temp_namespace="http://example.org/np/", timestamp=FIXED_DT)
        publication = next(build_publications([ALICE_1], options))
        assert str(publication.uri).startswith("http://example.org/np/")

    def test_unfinalized_output_is_ready_for_signing(self):
        options = BuildOptions(timestamp=FIXED_DT, finalize=False)
        publication = next(build_publications([ALICE_1], options))
        assert str(publication.uri).endswith("/")
        assert not is_self_certifying(publication)

    def test_options_from_config(self):
        config = PublicationConfig(creators=[ORCID], derived_from="https://example.org/src")
        options = BuildOptions.from_config(config, finalize=False)
        assert options.creators == (ORCID,)
        assert options.derived_from == "https://example.org/src"
        assert options.finalize is False
