"""Directory walking and file counting."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

from .utils import get_creation_time, is_hidden, to_posix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """Snapshot of a file taken when the walker discovers it."""
    path: Path
    created: float
    modified: float
    extension: str
    relative_dir: str
    root: Path
    size: int = 0
    hidden: bool = False

    @property
    def name(self) -> str:
        """Get filename without path."""
        return self.path.name

    @property
    def earlier_time(self) -> float:
        """Earlier of creation and last modification time."""
        return min(self.created, self.modified)


@dataclass(frozen=True)
class MissingDirectory:
    """A directory that was expected but does not exist."""
    path: Path


@dataclass(frozen=True)
class UnreadableDirectory:
    """A directory that exists but could not be listed."""
    path: Path
    reason: str


@dataclass(frozen=True)
class UnreadableFile:
    """A file whose metadata could not be read."""
    path: Path
    reason: str


ScanEvent = Union[FileEntry, MissingDirectory, UnreadableDirectory, UnreadableFile]


class DirectoryScanner:
    """Walks input roots depth first, files before subdirectories."""

    def count_files(self, roots: Iterable[Union[str, Path]]) -> int:
        """
        Count non-hidden files below all roots.

        Args:
            roots: Input root directories

        Returns:
            Total number of files, used as the progress denominator
        """
        return sum(self._count_directory(Path(root)) for root in roots)

    def _count_directory(self, directory: Path) -> int:
        if not directory.is_dir():
            return 0

        count = 0
        try:
            subdirectories = []
            for child in directory.iterdir():
                if child.is_dir():
                    if not is_hidden(child) and not child.is_symlink():
                        subdirectories.append(child)
                elif not is_hidden(child):
                    count += 1
            for subdirectory in subdirectories:
                count += self._count_directory(subdirectory)
        except OSError as e:
            logger.warning(f"Could not count files in {directory}: {e}")
            return 0

        return count

    def walk(self, root: Union[str, Path]) -> Iterator[ScanEvent]:
        """
        Walk one input root.

        Args:
            root: Input root directory

        Yields:
            FileEntry for every file (hidden ones flagged), MissingDirectory
            or UnreadableDirectory for directories that cannot be processed,
            UnreadableFile for files whose metadata cannot be read
        """
        root = Path(root)
        yield from self._walk_directory(root, root, Path('.'))

    def _walk_directory(self, root: Path, directory: Path, relative: Path) -> Iterator[ScanEvent]:
        if not directory.is_dir():
            logger.error(f"Directory {directory} does not exist")
            yield MissingDirectory(directory)
            return

        logger.info(f"Directory: {directory}")
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.error(f"Could not list directory {directory}: {e}")
            yield UnreadableDirectory(directory, str(e))
            return

        files = []
        subdirectories = []
        for child in children:
            try:
                if child.is_dir():
                    if child.is_symlink():
                        logger.info(f"Skipping directory link {child}")
                        continue
                    subdirectories.append(child)
                else:
                    files.append(child)
            except OSError as e:
                logger.warning(f"Could not inspect {child}: {e}")

        relative_dir = to_posix(relative)
        for file_path in files:
            yield self._make_entry(root, file_path, relative_dir)

        for subdirectory in subdirectories:
            if is_hidden(subdirectory):
                logger.info(f"Skipping hidden directory {subdirectory}")
                continue
            yield from self._walk_directory(root, subdirectory, relative / subdirectory.name)

    def _make_entry(self, root: Path, file_path: Path, relative_dir: str) -> Union[FileEntry, UnreadableFile]:
        try:
            st = file_path.stat()
        except OSError as e:
            # Broken symlinks and files removed while walking
            logger.error(f"Could not stat {file_path}: {e}")
            return UnreadableFile(file_path, str(e))

        return FileEntry(
            path=file_path.absolute(),
            created=get_creation_time(st),
            modified=st.st_mtime,
            extension=file_path.suffix,
            relative_dir=relative_dir,
            root=root,
            size=st.st_size,
            hidden=is_hidden(file_path, st),
        )
