"""
TalentMatch - rank candidate profiles against job descriptions.

A small matching toolkit that:
- Encodes job and candidate text into fixed-length character-hash embeddings
- Ranks candidates for a job by dot-product similarity, keeping the top matches
- Prefers a remote matching service and falls back to local ranking when it fails
"""

__version__ = "0.1.0"

from .embeddings import CharacterHashEncoder, encode
from .exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    InvalidKError,
    RemoteServiceError,
    TalentMatchError,
)
from .matching import match_top_k, rank

__all__ = [
    "CharacterHashEncoder",
    "DimensionMismatchError",
    "EmptyInputError",
    "InvalidKError",
    "RemoteServiceError",
    "TalentMatchError",
    "encode",
    "match_top_k",
    "rank",
]
