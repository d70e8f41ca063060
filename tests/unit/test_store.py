"""Unit tests for the in-memory store."""

import threading

import pytest

from talentmatch.store import SAMPLE_CANDIDATES, SAMPLE_JOBS, InMemoryStore


@pytest.mark.unit
def test_store_is_seeded_with_sample_data(store):
    assert [job.id for job in store.list_jobs()] == ["1", "2", "3"]
    assert [c.name for c in store.list_candidates()] == [c["name"] for c in SAMPLE_CANDIDATES]
    assert store.get_job("2").title == SAMPLE_JOBS[1]["title"]


@pytest.mark.unit
def test_unseeded_store_is_empty():
    store = InMemoryStore(seed=False)

    assert store.list_jobs() == []
    assert store.list_candidates() == []


@pytest.mark.unit
def test_add_assigns_sequential_ids(store):
    job = store.add_job("Platform", "Kubernetes")
    candidate = store.add_candidate("Dana", "Go", summary="SRE")

    assert job.id == "4"
    assert candidate.id == "4"
    assert store.get_candidate("4").summary == "SRE"


@pytest.mark.unit
def test_get_missing_returns_none(store):
    assert store.get_job("99") is None
    assert store.get_candidate("99") is None


@pytest.mark.unit
@pytest.mark.parametrize("query, expected", [
    ("", ["1", "2", "3"]),
    ("   ", ["1", "2", "3"]),
    ("O", ["2", "3"]),
    ("CELENA", ["1"]),
    ("nobody", []),
])
def test_search_candidates(store, query, expected):
    assert [c.id for c in store.search_candidates(query)] == expected


@pytest.mark.unit
def test_update_candidate_invalidates_cached_embedding(store, encoder):
    candidate = store.get_candidate("1")
    candidate.store_embedding(encoder.encode(candidate.embedding_text()))

    store.update_candidate("1", skills="Rust and Go")

    assert candidate.skills == "Rust and Go"
    assert candidate.embedding is None
    assert store.update_candidate("99", name="x") is None


@pytest.mark.unit
def test_concurrent_adds_get_unique_ids():
    store = InMemoryStore(seed=False)

    def add_many():
        for i in range(50):
            store.add_candidate(f"name {i}", "skills")

    threads = [threading.Thread(target=add_many) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [c.id for c in store.list_candidates()]
    assert len(ids) == 200
    assert len(set(ids)) == 200


@pytest.mark.unit
def test_get_stats_counts_cached_embeddings(store, encoder):
    assert store.get_stats() == {"jobs": 3, "candidates": 3, "cached_embeddings": 0}

    job = store.get_job("1")
    job.store_embedding(encoder.encode(job.embedding_text()))

    assert store.get_stats()["cached_embeddings"] == 1
