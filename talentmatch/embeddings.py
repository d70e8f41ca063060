"""
Character-hash encoder for turning job and candidate text into embeddings.

Each character adds its code point, divided by a fixed scale, into the slot
at ``position % dimension``. The accumulated vector is then L2-normalized,
so the dot product of two encoded texts is their cosine similarity.
"""

import numpy as np
from typing import List, Optional, Sequence
from rich.console import Console
from rich.progress import Progress

from .config import get_config_manager
from .exceptions import EmptyInputError

console = Console()

DEFAULT_DIMENSION = 64
DEFAULT_SCALE = 100.0


class CharacterHashEncoder:
    """Deterministic bag-of-characters encoder producing unit vectors."""

    def __init__(self,
                 dimension: Optional[int] = None,
                 scale: Optional[float] = None):
        if dimension is None or scale is None:
            config = get_config_manager()
            if dimension is None:
                dimension = config.get('embedding', 'dimension')
            if scale is None:
                scale = config.get('embedding', 'scale')

        if isinstance(dimension, bool) or not isinstance(dimension, int) or dimension < 1:
            raise ValueError(f"Embedding dimension must be a positive integer, got {dimension!r}")
        if scale <= 0:
            raise ValueError(f"Embedding scale must be positive, got {scale!r}")

        self.dimension = dimension
        self.scale = float(scale)

    def encode(self, text: str) -> np.ndarray:
        """
        Encode text into a unit-length embedding.

        Args:
            text: Text to encode. Whitespace is kept as-is.

        Returns:
            float64 array of length ``self.dimension`` with Euclidean norm 1

        Raises:
            EmptyInputError: If the text is empty or whitespace only
        """
        if text is None or not text.strip():
            raise EmptyInputError()

        codes = np.fromiter((ord(ch) for ch in text), dtype=np.float64, count=len(text))
        slots = np.arange(len(text)) % self.dimension

        accumulator = np.zeros(self.dimension, dtype=np.float64)
        # add.at accumulates repeated slots in character order
        np.add.at(accumulator, slots, codes / self.scale)

        norm = np.linalg.norm(accumulator)
        if norm == 0:
            raise EmptyInputError("Cannot encode text made only of NUL characters")

        return accumulator / norm

    def encode_batch(self, texts: Sequence[str],
                     show_progress: bool = False) -> List[np.ndarray]:
        """Encode several texts in order."""
        if show_progress and len(texts) > 1:
            embeddings = []
            with Progress(console=console) as progress:
                task = progress.add_task("Encoding texts...", total=len(texts))
                for text in texts:
                    embeddings.append(self.encode(text))
                    progress.update(task, advance=1)
            return embeddings

        return [self.encode(text) for text in texts]

    def get_info(self) -> dict:
        """Describe the encoder settings."""
        return {
            "encoder": "character-hash",
            "dimension": self.dimension,
            "scale": self.scale,
        }


def get_encoder(dimension: Optional[int] = None,
                scale: Optional[float] = None) -> CharacterHashEncoder:
    """Get an encoder instance, falling back to configured settings."""
    return CharacterHashEncoder(dimension=dimension, scale=scale)


def encode(text: str) -> np.ndarray:
    """Encode text with the configured encoder."""
    return get_encoder().encode(text)
