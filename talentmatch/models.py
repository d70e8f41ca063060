"""
Data models for jobs, candidates and match results.

Jobs and candidates own an explicit embedding cache. The cache remembers a
fingerprint of the text it was computed from, so editing the text makes the
cached vector stale without anyone having to clear it by hand.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import numpy as np


def text_fingerprint(text: str) -> str:
    """SHA-256 of the text, used as the cache's source marker."""
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CachedEmbedding:
    """An embedding together with the fingerprint of its source text."""
    vector: np.ndarray
    source_fingerprint: str

    def is_valid_for(self, text: str) -> bool:
        return self.source_fingerprint == text_fingerprint(text)


class EmbeddedEntity:
    """Mixin for records whose text is encoded for matching."""

    id: str
    embedding_cache: Optional[CachedEmbedding]

    def embedding_text(self) -> str:
        raise NotImplementedError

    @property
    def embedding(self) -> Optional[np.ndarray]:
        """Cached vector, or None when missing or stale."""
        cache = self.embedding_cache
        if cache is None or not cache.is_valid_for(self.embedding_text()):
            return None
        return cache.vector

    def store_embedding(self, vector: np.ndarray) -> None:
        """Cache a vector computed from the current text."""
        vector = np.array(vector, dtype=np.float64)
        # The cached copy is handed out to callers, so freeze it
        vector.flags.writeable = False
        self.embedding_cache = CachedEmbedding(vector, text_fingerprint(self.embedding_text()))

    def invalidate_embedding(self) -> None:
        self.embedding_cache = None


@dataclass(eq=False)
class Job(EmbeddedEntity):
    """A job posting."""
    id: str
    title: str
    description: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    embedding_cache: Optional[CachedEmbedding] = field(default=None, repr=False)

    def embedding_text(self) -> str:
        return f"{self.title} {self.description}"

    def to_dict(self, include_embedding: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }
        if include_embedding and self.embedding is not None:
            data["embedding"] = self.embedding.tolist()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        job = cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            created_at=_parse_timestamp(data.get("created_at")),
        )
        if data.get("embedding"):
            job.store_embedding(np.array(data["embedding"], dtype=np.float64))
        return job


@dataclass(eq=False)
class Candidate(EmbeddedEntity):
    """A candidate profile."""
    id: str
    name: str
    skills: str
    summary: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    embedding_cache: Optional[CachedEmbedding] = field(default=None, repr=False)

    def embedding_text(self) -> str:
        return f"{self.name} {self.skills}"

    def to_dict(self, include_embedding: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "skills": self.skills,
            "summary": self.summary,
            "created_at": self.created_at.isoformat(),
        }
        if include_embedding and self.embedding is not None:
            data["embedding"] = self.embedding.tolist()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        candidate = cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            skills=data.get("skills") or "",
            summary=data.get("summary"),
            created_at=_parse_timestamp(data.get("created_at")),
        )
        if data.get("embedding"):
            candidate.store_embedding(np.array(data["embedding"], dtype=np.float64))
        return candidate


@dataclass
class ScoredCandidate:
    """
    A candidate identifier paired with its similarity score.

    Score is None for results ranked by the remote service, which does not
    report scores.
    """
    item_id: Any
    score: Optional[float]
    position: int
    candidate: Optional[Candidate] = None
