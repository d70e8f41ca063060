"""Exceptions raised by the matching core and the remote service client."""

from typing import Optional


class TalentMatchError(Exception):
    """Base class for all TalentMatch errors."""


class EmptyInputError(TalentMatchError, ValueError):
    """Raised when text to encode is empty or whitespace only."""

    def __init__(self, message: str = "Cannot encode empty text"):
        super().__init__(message)


class DimensionMismatchError(TalentMatchError, ValueError):
    """
    Raised when two embeddings of different lengths are compared.

    Attributes:
        expected: Length of the query embedding
        actual: Length of the offending candidate embedding
        item_id: Identifier of the offending candidate, if known
    """

    def __init__(self, expected: int, actual: int, item_id: Optional[object] = None):
        self.expected = expected
        self.actual = actual
        self.item_id = item_id

        message = f"Embedding dimension mismatch: expected {expected}, got {actual}"
        if item_id is not None:
            message += f" (candidate {item_id})"
        super().__init__(message)


class InvalidKError(TalentMatchError, ValueError):
    """Raised when the number of results requested is not a positive integer."""

    def __init__(self, k: object):
        self.k = k
        super().__init__(f"k must be a positive integer, got {k!r}")


class RemoteServiceError(TalentMatchError):
    """
    Raised when the remote matching service call fails.

    Attributes:
        endpoint: Endpoint path that was called
        status_code: HTTP status code, or None for network failures
    """

    def __init__(self, message: str, endpoint: Optional[str] = None,
                 status_code: Optional[int] = None):
        self.endpoint = endpoint
        self.status_code = status_code

        parts = [message]
        if endpoint:
            parts.append(f"endpoint={endpoint}")
        if status_code is not None:
            parts.append(f"status={status_code}")
        super().__init__(" ".join(parts))
