"""
Similarity ranking for TalentMatch.

Scores candidate embeddings against a job embedding with a dot product and
returns the top matches. Embeddings produced by the encoder are unit length,
so the dot product equals cosine similarity. Vectors that were not normalized
by the encoder give raw dot products; normalizing them is up to the caller.
"""

import numpy as np
from typing import Any, Hashable, List, Optional, Sequence, Tuple

from .embeddings import CharacterHashEncoder, get_encoder
from .exceptions import DimensionMismatchError, InvalidKError
from .models import Candidate, EmbeddedEntity, Job, ScoredCandidate

DEFAULT_TOP_K = 3


def validate_k(k: Any) -> int:
    """Return k if it is a positive integer, else raise InvalidKError."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k <= 0:
        raise InvalidKError(k)
    return int(k)


def _as_vector(embedding: Any) -> np.ndarray:
    vector = np.asarray(embedding, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"Embedding must be one-dimensional, got shape {vector.shape}")
    return vector


def dot_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Dot product of two equal-length embeddings."""
    a = _as_vector(a)
    b = _as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(a.shape[0], b.shape[0])
    return float(np.dot(a, b))


def score_candidates(query: np.ndarray,
                     candidates: Sequence[Tuple[Hashable, np.ndarray]]) -> List[ScoredCandidate]:
    """
    Score every candidate against the query.

    Args:
        query: Query embedding
        candidates: Ordered (identifier, embedding) pairs

    Returns:
        All candidates as ScoredCandidate, highest score first. Equal scores
        keep their input order.

    Raises:
        DimensionMismatchError: If any candidate length differs from the query
    """
    query = _as_vector(query)
    dimension = query.shape[0]

    scored = []
    for position, (item_id, embedding) in enumerate(candidates):
        vector = _as_vector(embedding)
        if vector.shape[0] != dimension:
            raise DimensionMismatchError(dimension, vector.shape[0], item_id)
        scored.append(ScoredCandidate(item_id=item_id,
                                      score=float(np.dot(query, vector)),
                                      position=position))

    # sorted() is stable, reverse=True included
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank(query: np.ndarray,
         candidates: Sequence[Tuple[Hashable, np.ndarray]],
         k: int = DEFAULT_TOP_K) -> List[Hashable]:
    """Return the identifiers of the top k candidates, best first."""
    k = validate_k(k)
    return [s.item_id for s in score_candidates(query, candidates)[:k]]


def embedding_for(entity: EmbeddedEntity,
                  encoder: Optional[CharacterHashEncoder] = None) -> np.ndarray:
    """
    Return the entity's embedding, computing it only when missing or stale.

    Encoding is pure, so two callers racing to fill the same cache store
    identical vectors.
    """
    cached = entity.embedding
    if cached is not None:
        return cached

    encoder = encoder or get_encoder()
    vector = encoder.encode(entity.embedding_text())
    entity.store_embedding(vector)
    return entity.embedding


def match_top_k(job_text: str,
                candidates: Sequence[Tuple[Hashable, str]],
                k: int = DEFAULT_TOP_K,
                encoder: Optional[CharacterHashEncoder] = None) -> List[Hashable]:
    """Encode a job text and candidate texts, then rank the candidates."""
    k = validate_k(k)
    encoder = encoder or get_encoder()

    query = encoder.encode(job_text)
    encoded = [(item_id, encoder.encode(text)) for item_id, text in candidates]
    return rank(query, encoded, k)


class SimilarityMatcher:
    """Ranks candidate records against a job record using cached embeddings."""

    def __init__(self, encoder: Optional[CharacterHashEncoder] = None,
                 top_k: int = DEFAULT_TOP_K):
        self.encoder = encoder or get_encoder()
        self.top_k = validate_k(top_k)

    def score_query(self, query: np.ndarray, candidates: Sequence[Candidate]) -> List[ScoredCandidate]:
        """Score candidate records against an already encoded query."""
        pairs = [(candidate.id, embedding_for(candidate, self.encoder)) for candidate in candidates]

        results = score_candidates(query, pairs)
        for result in results:
            result.candidate = candidates[result.position]
        return results

    def score_job(self, job: Job, candidates: Sequence[Candidate]) -> List[ScoredCandidate]:
        """Score all candidates for a job, best first, with records attached."""
        return self.score_query(embedding_for(job, self.encoder), candidates)

    def score_text(self, job_text: str, candidates: Sequence[Candidate]) -> List[ScoredCandidate]:
        """Score all candidates for a free-text job description."""
        return self.score_query(self.encoder.encode(job_text), candidates)

    def find_matching_candidates(self, job: Job, candidates: Sequence[Candidate],
                                 k: Optional[int] = None) -> List[Candidate]:
        """Return the top k candidate records for a job."""
        k = validate_k(self.top_k if k is None else k)
        return [result.candidate for result in self.score_job(job, candidates)[:k]]
