"""Duplicate detection and name collision resolution."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


def files_identical(first: Path, second: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    """
    Compare two files byte for byte.

    Files of different length are never identical and are not read at all.
    Otherwise both files are streamed in chunks and the comparison stops at
    the first differing chunk.

    Args:
        first: First file path
        second: Second file path
        chunk_size: Number of bytes read from each file per step

    Returns:
        True if both files have the same content
    """
    if Path(first).stat().st_size != Path(second).stat().st_size:
        return False

    with open(first, 'rb') as f1, open(second, 'rb') as f2:
        while True:
            chunk1 = f1.read(chunk_size)
            chunk2 = f2.read(chunk_size)
            if chunk1 != chunk2:
                return False
            if not chunk1:
                return True


def suffixed_name(path: Path, counter: int) -> Path:
    """Return ``path`` with ``_<counter>`` inserted before the extension."""
    return path.with_name(f"{path.stem}_{counter}{path.suffix}")


@dataclass(frozen=True)
class Resolution:
    """Where a source file should go, or that it is already there."""
    path: Path
    duplicate: bool = False
    renamed: bool = False


class CollisionResolver:
    """Decides between duplicate, rename and plain placement."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize resolver.

        Args:
            chunk_size: Chunk size used for content comparison
        """
        self.chunk_size = chunk_size

    def resolve(self, source: Path, candidate: Path, planned: Optional[Dict[Path, Path]] = None) -> Resolution:
        """
        Resolve the final destination for ``source``.

        Args:
            source: File about to be placed
            candidate: Natural destination path
            planned: Destinations already taken by files not written yet,
                mapped to their source file

        Returns:
            Resolution with the accepted path. ``duplicate`` is set when the
            existing file at ``candidate`` has the same content as ``source``.
        """
        planned = planned or {}

        def occupied(path: Path) -> bool:
            return path in planned or path.exists()

        if not occupied(candidate):
            return Resolution(candidate)

        if files_identical(source, planned.get(candidate, candidate), self.chunk_size):
            logger.debug(f"Identical content already at {candidate}")
            return Resolution(candidate, duplicate=True)

        counter = 0
        path = candidate
        while occupied(path):
            counter += 1
            path = suffixed_name(candidate, counter)

        logger.debug(f"Name collision at {candidate}, using {path.name}")
        return Resolution(path, renamed=True)
