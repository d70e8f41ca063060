"""Unit tests for job and candidate records and their embedding cache."""

from datetime import datetime, timezone

import numpy as np
import pytest

from talentmatch.models import Candidate, Job, text_fingerprint


@pytest.mark.unit
def test_embedding_text_concatenates_fields():
    job = Job(id="1", title="Sieve", description="SDK development")
    candidate = Candidate(id="1", name="Celena Chang", skills="React, TypeScript")

    assert job.embedding_text() == "Sieve SDK development"
    assert candidate.embedding_text() == "Celena Chang React, TypeScript"


@pytest.mark.unit
def test_embedding_missing_until_stored():
    job = Job(id="1", title="Sieve", description="SDK development")
    assert job.embedding is None

    job.store_embedding(np.array([1.0, 0.0]))

    assert job.embedding_cache.source_fingerprint == text_fingerprint("Sieve SDK development")
    np.testing.assert_array_equal(job.embedding, [1.0, 0.0])


@pytest.mark.unit
def test_stored_embedding_is_read_only_copy():
    source = np.array([0.6, 0.8])
    job = Job(id="1", title="Sieve", description="SDK development")

    job.store_embedding(source)
    source[0] = 0.0

    assert job.embedding[0] == 0.6
    with pytest.raises(ValueError):
        job.embedding[0] = 1.0


@pytest.mark.unit
def test_text_change_makes_cache_stale():
    candidate = Candidate(id="1", name="Ada", skills="Python")
    candidate.store_embedding(np.array([1.0]))

    candidate.name = "Grace"

    assert candidate.embedding is None
    assert candidate.embedding_cache is not None


@pytest.mark.unit
def test_invalidate_embedding():
    candidate = Candidate(id="1", name="Ada", skills="Python")
    candidate.store_embedding(np.array([1.0]))

    candidate.invalidate_embedding()

    assert candidate.embedding_cache is None


@pytest.mark.unit
def test_job_from_dict_normalizes_id_and_timestamp():
    job = Job.from_dict({
        "id": 7,
        "title": "Koodos",
        "description": "Kafka",
        "created_at": "2024-05-01T12:00:00Z",
    })

    assert job.id == "7"
    assert job.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert job.embedding is None


@pytest.mark.unit
def test_candidate_from_dict_keeps_remote_embedding():
    candidate = Candidate.from_dict({
        "id": "4",
        "name": "Remote",
        "skills": "Go",
        "embedding": [0.0, 1.0],
        "created_at": "not a date",
    })

    np.testing.assert_array_equal(candidate.embedding, [0.0, 1.0])
    assert candidate.created_at.tzinfo is not None
    assert candidate.summary is None


@pytest.mark.unit
def test_to_dict_round_trip_fields():
    candidate = Candidate(id="2", name="Alonso", skills="Python", summary="Ex-Google")
    candidate.store_embedding(np.array([1.0, 0.0]))

    data = candidate.to_dict(include_embedding=True)

    assert data["id"] == "2"
    assert data["summary"] == "Ex-Google"
    assert data["embedding"] == [1.0, 0.0]
    assert "embedding" not in candidate.to_dict()
