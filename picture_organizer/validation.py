"""File name validation before a copy is committed."""

import os
from pathlib import PurePath
from typing import Optional

WINDOWS_INVALID_CHARS = '<>:"/\\|?*' + ''.join(chr(code) for code in range(32))
POSIX_INVALID_CHARS = '/\0'

RESERVED_NAMES = frozenset(
    ['CON', 'PRN', 'AUX', 'NUL']
    + [f'COM{i}' for i in range(1, 10)]
    + [f'LPT{i}' for i in range(1, 10)]
)

MAX_FILE_NAME_LENGTH = 255


def platform_invalid_chars() -> str:
    """Characters the host platform refuses in a file name."""
    return WINDOWS_INVALID_CHARS if os.name == 'nt' else POSIX_INVALID_CHARS


def validate_file_name(file_name: str, invalid_chars: Optional[str] = None) -> Optional[str]:
    """
    Validate a file name.

    Args:
        file_name: Name without any directory part
        invalid_chars: Characters to reject, defaults to the platform set

    Returns:
        None if the name is valid, otherwise the reason it was rejected
    """
    if invalid_chars is None:
        invalid_chars = platform_invalid_chars()

    for ch in file_name:
        if ch in invalid_chars:
            return f"invalid character error '{ch}'"

    base_name = PurePath(file_name).stem
    if base_name.upper() in RESERVED_NAMES:
        return "reserved name error"

    if len(file_name) > MAX_FILE_NAME_LENGTH:
        return "length error"

    return None
