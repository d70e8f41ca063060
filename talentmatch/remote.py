"""
Client for the remote matching service.

Wraps the service's job, candidate, match and search endpoints. Every
failure, whether a non-2xx response or a network error, surfaces as
RemoteServiceError; deciding what to do about it is the caller's job.
"""

from typing import Any, Dict, List, Optional

import requests

from .config import get_config_manager
from .exceptions import RemoteServiceError


class MatchingServiceClient:
    """Client for the remote jobs/candidates/match API."""

    ENDPOINTS = {
        "jobs": "/jobs",
        "candidates": "/candidates",
        "match": "/match",
        "search_candidates": "/candidates/search",
    }

    def __init__(self, base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        config = get_config_manager()

        if base_url is None:
            base_url = config.get('remote', 'base_url')
        if timeout is None:
            timeout = config.get('remote', 'timeout')

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'talentmatch/0.1',
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

    def get_url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body."""
        try:
            response = self.session.request(method, self.get_url(endpoint),
                                            timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteServiceError(f"Request failed: {e}", endpoint=endpoint) from e

        if not 200 <= response.status_code < 300:
            raise RemoteServiceError("API error", endpoint=endpoint,
                                     status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError("Invalid JSON in response", endpoint=endpoint,
                                     status_code=response.status_code) from e

    def _expect_list(self, data: Any, endpoint: str) -> List[Dict]:
        if not isinstance(data, list):
            raise RemoteServiceError("Expected a JSON list", endpoint=endpoint)
        for item in data:
            if not isinstance(item, dict) or "id" not in item:
                raise RemoteServiceError("Expected a list of JSON objects with ids", endpoint=endpoint)
        return data

    def _expect_object(self, data: Any, endpoint: str) -> Dict:
        if not isinstance(data, dict) or "id" not in data:
            raise RemoteServiceError("Expected a JSON object with an id", endpoint=endpoint)
        return data

    def test_connection(self) -> bool:
        """Test if the service answers the jobs listing."""
        try:
            self.get_jobs()
            return True
        except RemoteServiceError:
            return False

    def get_jobs(self) -> List[Dict]:
        endpoint = self.ENDPOINTS["jobs"]
        return self._expect_list(self._request("GET", endpoint), endpoint)

    def create_job(self, title: str, description: str) -> Dict:
        endpoint = self.ENDPOINTS["jobs"]
        data = self._request("POST", endpoint, json={"title": title, "description": description})
        return self._expect_object(data, endpoint)

    def get_candidates(self) -> List[Dict]:
        endpoint = self.ENDPOINTS["candidates"]
        return self._expect_list(self._request("GET", endpoint), endpoint)

    def create_candidate(self, name: str, skills: str, summary: Optional[str] = None) -> Dict:
        endpoint = self.ENDPOINTS["candidates"]
        payload = {"name": name, "skills": skills}
        if summary is not None:
            payload["summary"] = summary
        data = self._request("POST", endpoint, json=payload)
        return self._expect_object(data, endpoint)

    def match_candidates(self, job_id: str, job_title: Optional[str] = None,
                         job_description: Optional[str] = None) -> List[Dict]:
        """Ask the service for the best candidates for a job."""
        endpoint = self.ENDPOINTS["match"]
        payload = {"jobId": job_id}
        # Title and description are only sent when known locally
        if job_title is not None:
            payload["jobTitle"] = job_title
        if job_description is not None:
            payload["jobDescription"] = job_description
        return self._expect_list(self._request("POST", endpoint, json=payload), endpoint)

    def match_description(self, job_description: str) -> List[Dict]:
        """Ask the service for the best candidates for a free-text job description."""
        endpoint = self.ENDPOINTS["match"]
        data = self._request("POST", endpoint, json={"jobDescription": job_description})
        return self._expect_list(data, endpoint)

    def search_candidates(self, name: str) -> List[Dict]:
        endpoint = self.ENDPOINTS["search_candidates"]
        data = self._request("GET", endpoint, params={"name": name})
        return self._expect_list(data, endpoint)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_matching_client(base_url: Optional[str] = None) -> MatchingServiceClient:
    """Get a matching service client instance."""
    return MatchingServiceClient(base_url=base_url)
