"""
Matching engine for TalentMatch - remote service first, local core as fallback.

Every operation asks the remote matching service first. When that call fails
(non-2xx response or network error) the engine logs a warning and answers
from the in-memory store and the local similarity matcher instead. Local
validation errors are never caught here.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rich.console import Console

from .config import get_config_manager
from .embeddings import CharacterHashEncoder, get_encoder
from .exceptions import RemoteServiceError
from .matching import SimilarityMatcher, embedding_for, validate_k
from .models import Candidate, EmbeddedEntity, Job, ScoredCandidate
from .remote import MatchingServiceClient, get_matching_client
from .store import InMemoryStore

console = Console(stderr=True)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"


@dataclass
class MatchOutcome:
    """Ranked candidates for a job (or a free-text description) and where the ranking came from."""
    job_id: Optional[str]
    source: str
    results: List[ScoredCandidate] = field(default_factory=list)

    @property
    def candidates(self) -> List[Candidate]:
        return [result.candidate for result in self.results]


class MatchingEngine:
    """High-level interface over the remote service and the local matcher."""

    def __init__(self,
                 store: Optional[InMemoryStore] = None,
                 client: Optional[MatchingServiceClient] = None,
                 encoder: Optional[CharacterHashEncoder] = None,
                 top_k: Optional[int] = None,
                 use_remote: Optional[bool] = None):
        config = get_config_manager()

        if top_k is None:
            top_k = config.get('matching', 'top_k')
        if use_remote is None:
            use_remote = config.get('remote', 'enabled')

        self.store = store if store is not None else InMemoryStore()
        self.encoder = encoder or get_encoder()
        self.matcher = SimilarityMatcher(self.encoder, top_k=top_k)
        self.top_k = self.matcher.top_k

        if client is None and use_remote:
            client = get_matching_client()
        self.client = client if use_remote else None

    def _warn_fallback(self, action: str, error: RemoteServiceError) -> None:
        console.print(f"[yellow]Warning: remote {action} failed ({error}), using local data[/yellow]")

    def _cache_embedding(self, entity: EmbeddedEntity, text: str, vector) -> None:
        # Reuse the vector only when the returned record kept the submitted text
        if entity.embedding is not None:
            return
        if entity.embedding_text() == text:
            entity.store_embedding(vector)
        else:
            embedding_for(entity, self.encoder)

    # Jobs
    def list_jobs(self) -> List[Job]:
        """List jobs from the service, or the local store on failure."""
        if self.client is not None:
            try:
                return [Job.from_dict(data) for data in self.client.get_jobs()]
            except RemoteServiceError as e:
                self._warn_fallback("job listing", e)
        return self.store.list_jobs()

    def create_job(self, title: str, description: str) -> Job:
        """
        Create a job remotely, or locally on failure.

        The embedding is computed before anything is created, so blank text
        is rejected with EmptyInputError either way.
        """
        text = f"{title} {description}"
        vector = self.encoder.encode(text)

        if self.client is not None:
            try:
                job = Job.from_dict(self.client.create_job(title, description))
                self._cache_embedding(job, text, vector)
                return job
            except RemoteServiceError as e:
                self._warn_fallback("job creation", e)

        job = self.store.add_job(title, description)
        job.store_embedding(vector)
        return job

    # Candidates
    def list_candidates(self) -> List[Candidate]:
        """List candidates from the service, or the local store on failure."""
        if self.client is not None:
            try:
                return [Candidate.from_dict(data) for data in self.client.get_candidates()]
            except RemoteServiceError as e:
                self._warn_fallback("candidate listing", e)
        return self.store.list_candidates()

    def create_candidate(self, name: str, skills: str, summary: Optional[str] = None) -> Candidate:
        """Create a candidate remotely, or locally on failure."""
        text = f"{name} {skills}"
        vector = self.encoder.encode(text)

        if self.client is not None:
            try:
                candidate = Candidate.from_dict(self.client.create_candidate(name, skills, summary))
                self._cache_embedding(candidate, text, vector)
                return candidate
            except RemoteServiceError as e:
                self._warn_fallback("candidate creation", e)

        candidate = self.store.add_candidate(name, skills, summary)
        candidate.store_embedding(vector)
        return candidate

    def search_candidates(self, name: str) -> List[Candidate]:
        """Search candidates by name remotely, or filter locally on failure."""
        if self.client is not None:
            try:
                return [Candidate.from_dict(data) for data in self.client.search_candidates(name)]
            except RemoteServiceError as e:
                self._warn_fallback("candidate search", e)
        return self.store.search_candidates(name)

    # Matching
    def _remote_outcome(self, job_id: Optional[str], remote_results: List[Dict], k: int) -> MatchOutcome:
        candidates = [Candidate.from_dict(data) for data in remote_results[:k]]
        return MatchOutcome(
            job_id=job_id,
            source=SOURCE_REMOTE,
            results=[ScoredCandidate(item_id=c.id, score=None, position=i, candidate=c)
                     for i, c in enumerate(candidates)],
        )

    def run_match(self, job_id: str, k: Optional[int] = None,
                  local_only: bool = False) -> MatchOutcome:
        """
        Rank candidates for a job.

        Args:
            job_id: Job identifier
            k: Number of candidates to return (default: configured top_k)
            local_only: Skip the remote service entirely

        Returns:
            MatchOutcome with the ranked results and their source. Remote
            results keep the service's order, carry no scores and are cut to k.
        """
        job_id = str(job_id)
        k = validate_k(self.top_k if k is None else k)
        job = self.store.get_job(job_id)

        if self.client is not None and not local_only:
            try:
                remote_results = self.client.match_candidates(
                    job_id,
                    job_title=job.title if job else None,
                    job_description=job.description if job else None,
                )
                return self._remote_outcome(job_id, remote_results, k)
            except RemoteServiceError as e:
                self._warn_fallback("matching", e)

        if job is None:
            console.print(f"[red]Job with ID {job_id} not found locally for fallback matching[/red]")
            return MatchOutcome(job_id=job_id, source=SOURCE_LOCAL)

        results = self.matcher.score_job(job, self.store.list_candidates())[:k]
        return MatchOutcome(job_id=job_id, source=SOURCE_LOCAL, results=results)

    def match_description(self, job_description: str, k: Optional[int] = None,
                          local_only: bool = False) -> MatchOutcome:
        """
        Rank candidates for a free-text job description.

        The text is encoded up front, so blank descriptions raise
        EmptyInputError before the service is contacted. The local fallback
        ranks every candidate in the store.
        """
        k = validate_k(self.top_k if k is None else k)
        query = self.encoder.encode(job_description)

        if self.client is not None and not local_only:
            try:
                remote_results = self.client.match_description(job_description)
                return self._remote_outcome(None, remote_results, k)
            except RemoteServiceError as e:
                self._warn_fallback("description matching", e)

        results = self.matcher.score_query(query, self.store.list_candidates())[:k]
        return MatchOutcome(job_id=None, source=SOURCE_LOCAL, results=results)

    def match_candidates(self, job_id: str, k: Optional[int] = None,
                         local_only: bool = False) -> List[Candidate]:
        """Return the best candidates for a job."""
        return self.run_match(job_id, k=k, local_only=local_only).candidates

    def warm_cache(self) -> int:
        """Compute missing or stale embeddings in the local store."""
        computed = 0
        for entity in [*self.store.list_jobs(), *self.store.list_candidates()]:
            if entity.embedding is None:
                embedding_for(entity, self.encoder)
                computed += 1
        return computed

    def get_status(self) -> Dict:
        """Get status of the remote service, store and encoder."""
        status = {
            "remote_enabled": self.client is not None,
            "remote_url": self.client.base_url if self.client is not None else None,
            "remote_reachable": False,
            "store": self.store.get_stats(),
            "encoder": self.encoder.get_info(),
            "top_k": self.top_k,
        }

        if self.client is not None:
            status["remote_reachable"] = self.client.test_connection()

        return status


def get_matching_engine(store: Optional[InMemoryStore] = None,
                        use_remote: Optional[bool] = None) -> MatchingEngine:
    """Get matching engine instance."""
    return MatchingEngine(store=store, use_remote=use_remote)
