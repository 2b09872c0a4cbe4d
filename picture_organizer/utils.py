"""Utility functions for the picture organizer."""

import os
import shutil
import stat
import psutil
from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from .duplicates import files_identical

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


def is_hidden(path: Path, st: Optional[os.stat_result] = None) -> bool:
    """
    Check whether a file or directory is hidden.

    A name starting with a dot is hidden everywhere; on Windows the hidden
    file attribute is honoured as well.

    Args:
        path: Path to check
        st: Already available stat result for ``path``

    Returns:
        True if the entry is hidden
    """
    if path.name.startswith('.'):
        return True

    attributes = getattr(st, 'st_file_attributes', None)
    if attributes is None and os.name == 'nt':
        try:
            attributes = path.stat().st_file_attributes
        except OSError:
            return False
    return bool(attributes and attributes & getattr(stat, 'FILE_ATTRIBUTE_HIDDEN', 0x2))


def get_creation_time(st: os.stat_result) -> float:
    """Creation timestamp of a stat result, falling back to st_ctime."""
    return getattr(st, 'st_birthtime', None) or st.st_ctime


def format_bytes(bytes_value: int) -> str:
    """
    Format bytes as human-readable string.

    Args:
        bytes_value: Size in bytes

    Returns:
        Formatted string like "1.2GB"
    """
    if bytes_value == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(bytes_value)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.1f}{units[unit_index]}"


def get_available_space(path: Path) -> int:
    """
    Get available disk space for a path in bytes.

    The nearest existing ancestor is used when ``path`` does not exist yet.

    Args:
        path: Path to check

    Returns:
        Available space in bytes, 0 if it cannot be determined
    """
    probe = Path(path)
    while not probe.exists() and probe.parent != probe:
        probe = probe.parent
    try:
        usage = psutil.disk_usage(str(probe))
        return usage.free
    except Exception as e:
        logger.error(f"Failed to get disk space for {path}: {e}")
        return 0


def ensure_directory(path: Path) -> bool:
    """
    Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure

    Returns:
        True if the directory was created by this call
    """
    if path.is_dir():
        return False
    path.mkdir(parents=True, exist_ok=True)
    return True


def safe_copy_file(source: Path, destination: Path, verify: bool = False) -> int:
    """
    Copy a file to a destination that must not exist yet.

    The destination is opened exclusively so that a file written by another
    process in the meantime is never overwritten. Timestamps and permission
    bits are copied after the content. A partially written destination is
    removed before the error propagates.

    Args:
        source: Source file path
        destination: Destination file path
        verify: Whether to compare the copy with the source afterwards

    Returns:
        Number of bytes copied

    Raises:
        OSError: If the copy or the verification fails
    """
    created = False
    try:
        with open(source, 'rb') as src, open(destination, 'xb') as dst:
            created = True
            shutil.copyfileobj(src, dst, COPY_BUFFER_SIZE)
        shutil.copystat(source, destination)

        if verify and not files_identical(source, destination):
            raise OSError(f"Verification failed for {source} -> {destination}")
    except OSError:
        if created:
            try:
                destination.unlink()
            except OSError as e:
                logger.warning(f"Could not remove partial copy {destination}: {e}")
        raise

    logger.debug(f"Successfully copied {source} -> {destination}")
    return destination.stat().st_size


def to_posix(relative: Path) -> str:
    """Render a relative path with forward slashes, '' for the current dir."""
    text = relative.as_posix()
    return '' if text == '.' else text


def get_current_timestamp():
    """Get current timestamp as ISO string."""
    return datetime.now().isoformat()
