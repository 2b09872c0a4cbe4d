"""Destination path computation for organized files."""

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Union

from .scanner import FileEntry
from .utils import ensure_directory

logger = logging.getLogger(__name__)

# Month names per locale; index 0 is January
MONTH_NAMES = {
    'it': ['gennaio', 'febbraio', 'marzo', 'aprile', 'maggio', 'giugno',
           'luglio', 'agosto', 'settembre', 'ottobre', 'novembre', 'dicembre'],
    'en': ['January', 'February', 'March', 'April', 'May', 'June',
           'July', 'August', 'September', 'October', 'November', 'December'],
    'de': ['Januar', 'Februar', 'März', 'April', 'Mai', 'Juni',
           'Juli', 'August', 'September', 'Oktober', 'November', 'Dezember'],
    'fr': ['janvier', 'février', 'mars', 'avril', 'mai', 'juin',
           'juillet', 'août', 'septembre', 'octobre', 'novembre', 'décembre'],
    'es': ['enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio',
           'julio', 'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre'],
}

LOWERCASE_LETTER = re.compile(r'[a-z]')


@dataclass(frozen=True)
class DestinationPath:
    """Computed placement of a file below the output root."""
    year: str
    month: str
    subdirectory: str
    file_name: str

    def directory(self, output_root: Union[str, Path]) -> Path:
        """Destination directory below ``output_root``."""
        directory = Path(output_root) / self.year / self.month
        if self.subdirectory:
            directory = directory.joinpath(*self.subdirectory.split('/'))
        return directory

    def path(self, output_root: Union[str, Path]) -> Path:
        """Full destination file path below ``output_root``."""
        return self.directory(output_root) / self.file_name

    def with_name(self, file_name: str) -> 'DestinationPath':
        """Same placement under a different file name."""
        return replace(self, file_name=file_name)


def month_label(moment: datetime, locale: str = 'it') -> str:
    """
    Render the month folder name, e.g. ``3.marzo``.

    Args:
        moment: Date the label is computed for
        locale: Key of MONTH_NAMES

    Returns:
        Month number without padding, a dot and the full month name
    """
    names = MONTH_NAMES[locale]
    return f"{moment.month}.{names[moment.month - 1]}"


def clean_subdirectory(relative_dir: str) -> str:
    """
    Normalize the relative directory a file was found in.

    Directories without any lowercase ASCII letter (``DCIM``, ``100``,
    ``___``) are dropped entirely.
    """
    relative_dir = relative_dir.replace('\\', '/').strip('/')
    if not LOWERCASE_LETTER.search(relative_dir):
        return ''
    return relative_dir


class DestinationBuilder:
    """Builds and prepares destination paths below one output root."""

    def __init__(self, output_root: Union[str, Path], locale: str = 'it'):
        """
        Initialize builder.

        Args:
            output_root: Root of the organized tree
            locale: Month name locale, one of MONTH_NAMES
        """
        if locale not in MONTH_NAMES:
            raise ValueError(f"Unsupported month locale: {locale}")
        self.output_root = Path(output_root)
        self.locale = locale

    def build(self, entry: FileEntry) -> DestinationPath:
        """Compute the destination of ``entry``."""
        earlier = datetime.fromtimestamp(entry.earlier_time)
        file_name = entry.path.stem + entry.extension.lower()
        return DestinationPath(
            year=str(earlier.year),
            month=month_label(earlier, self.locale),
            subdirectory=clean_subdirectory(entry.relative_dir),
            file_name=file_name,
        )

    def directory(self, destination: DestinationPath) -> Path:
        """Destination directory of ``destination`` below the output root."""
        return destination.directory(self.output_root)

    def path(self, destination: DestinationPath) -> Path:
        """Full destination path of ``destination`` below the output root."""
        return destination.path(self.output_root)

    def ensure(self, directory: Path) -> None:
        """Create ``directory`` and its parents when missing."""
        if ensure_directory(directory):
            logger.info(f"Created directory {directory}")
