"""
In-memory job and candidate store.

Stands in for the remote listing service when it cannot be reached. Seeded
with a small sample data set so local matching always has something to rank.
"""

import threading
from typing import Dict, List, Optional

from .models import Candidate, Job

SAMPLE_JOBS = [
    {
        "id": "1",
        "title": "Sieve",
        "description": "Product involving SDK development; uses Next.js, Python, Redis.",
    },
    {
        "id": "2",
        "title": "Avoca",
        "description": "Company focused on AI Agents; stack includes PostgreSQL and cloud services.",
    },
    {
        "id": "3",
        "title": "Koodos",
        "description": "Platform for data pipelines; uses Kafka and ClickHouse.",
    },
]

SAMPLE_CANDIDATES = [
    {
        "id": "1",
        "name": "Celena Chang",
        "skills": "Formerly at Flatiron Health; expert in React, TypeScript, PostgreSQL; CS grad from UC Berkeley.",
    },
    {
        "id": "2",
        "name": "Alonso Koumba",
        "skills": "Ex-Google engineer; expert in Python and PostgreSQL; CS grad from Stanford.",
    },
    {
        "id": "3",
        "name": "Calvin Goah",
        "skills": "Engineer at IXL Learning; skilled in Node.js, React, PostgreSQL; CS grad from Columbia.",
    },
]


class InMemoryStore:
    """Keeps jobs and candidates in insertion order."""

    def __init__(self, seed: bool = True):
        self._jobs: Dict[str, Job] = {}
        self._candidates: Dict[str, Candidate] = {}
        self._lock = threading.Lock()

        if seed:
            for data in SAMPLE_JOBS:
                job = Job.from_dict(data)
                self._jobs[job.id] = job
            for data in SAMPLE_CANDIDATES:
                candidate = Candidate.from_dict(data)
                self._candidates[candidate.id] = candidate

    # Job management
    def add_job(self, title: str, description: str) -> Job:
        """Add a job under the next sequential id."""
        with self._lock:
            job = Job(id=str(len(self._jobs) + 1), title=title, description=description)
            self._jobs[job.id] = job
            return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(str(job_id))

    def list_jobs(self) -> List[Job]:
        return list(self._jobs.values())

    # Candidate management
    def add_candidate(self, name: str, skills: str, summary: Optional[str] = None) -> Candidate:
        """Add a candidate under the next sequential id."""
        with self._lock:
            candidate = Candidate(id=str(len(self._candidates) + 1), name=name,
                                  skills=skills, summary=summary)
            self._candidates[candidate.id] = candidate
            return candidate

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return self._candidates.get(str(candidate_id))

    def list_candidates(self) -> List[Candidate]:
        return list(self._candidates.values())

    def update_candidate(self, candidate_id: str, name: Optional[str] = None,
                         skills: Optional[str] = None,
                         summary: Optional[str] = None) -> Optional[Candidate]:
        """
        Update candidate fields in place.

        Changing name or skills makes the cached embedding stale, so the next
        match recomputes it.
        """
        with self._lock:
            candidate = self._candidates.get(str(candidate_id))
            if candidate is None:
                return None
            if name is not None:
                candidate.name = name
            if skills is not None:
                candidate.skills = skills
            if summary is not None:
                candidate.summary = summary
            return candidate

    def search_candidates(self, name: str) -> List[Candidate]:
        """Case-insensitive substring search on candidate names."""
        if not name.strip():
            return self.list_candidates()

        needle = name.lower()
        return [c for c in self._candidates.values() if needle in c.name.lower()]

    def get_stats(self) -> Dict[str, int]:
        return {
            "jobs": len(self._jobs),
            "candidates": len(self._candidates),
            "cached_embeddings": sum(
                1 for entity in [*self._jobs.values(), *self._candidates.values()]
                if entity.embedding is not None
            ),
        }
