"""Organizing input directories into a dated destination tree."""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from .config import Config, ConfigError
from .duplicates import CollisionResolver
from .placement import DestinationBuilder
from .scanner import (
    DirectoryScanner,
    FileEntry,
    MissingDirectory,
    ScanEvent,
    UnreadableDirectory,
)
from .utils import format_bytes, get_available_space, get_current_timestamp, safe_copy_file
from .validation import validate_file_name

logger = logging.getLogger(__name__)


class ProcessingOutcome(Enum):
    """What happened to a discovered file."""
    COPIED = 'copied'
    SKIPPED_DUPLICATE = 'skipped_duplicate'
    SKIPPED_EXTENSION = 'skipped_extension'
    SKIPPED_HIDDEN = 'skipped_hidden'
    SKIPPED_INVALID_NAME = 'skipped_invalid_name'
    SKIPPED_MISSING_DIRECTORY = 'skipped_missing_directory'
    ERROR = 'error'


FAILURE_OUTCOMES = (ProcessingOutcome.ERROR, ProcessingOutcome.SKIPPED_INVALID_NAME)


@dataclass(frozen=True)
class OutcomeRecord:
    """Result of processing one file or one unusable directory."""
    outcome: ProcessingOutcome
    source: Path
    destination: Optional[Path] = None
    reason: str = ''
    size: int = 0

    def __str__(self) -> str:
        text = f"{self.outcome.value}: {self.source}"
        if self.destination is not None:
            text += f" -> {self.destination}"
        if self.reason:
            text += f" ({self.reason})"
        return text


@dataclass(frozen=True)
class Progress:
    """Immutable progress snapshot."""
    processed: int = 0
    total: int = 0

    @property
    def percentage(self) -> float:
        """Processed share in percent, 0 when there is nothing to process."""
        if self.total <= 0:
            return 0.0
        return min(100.0, self.processed / self.total * 100)

    @property
    def text(self) -> str:
        """Human readable counter like ``12 / 40``."""
        return f"{self.processed} / {self.total}"


ProgressCallback = Callable[[Progress], None]


@dataclass
class OrganizeStats:
    """Statistics for an organizing run."""
    total_files: int = 0
    processed_files: int = 0
    copied_size: int = 0
    counts: Dict[ProcessingOutcome, int] = None
    errors: List[str] = None
    failures: List[OutcomeRecord] = None

    def __post_init__(self):
        if self.counts is None:
            self.counts = {outcome: 0 for outcome in ProcessingOutcome}
        if self.errors is None:
            self.errors = []
        if self.failures is None:
            self.failures = []

    def add(self, record: OutcomeRecord) -> None:
        """Account for one outcome record."""
        self.counts[record.outcome] += 1
        if record.outcome is ProcessingOutcome.COPIED:
            self.copied_size += record.size
        elif record.outcome in FAILURE_OUTCOMES:
            self.failures.append(record)
            self.errors.append(str(record))
        elif record.outcome is ProcessingOutcome.SKIPPED_MISSING_DIRECTORY:
            self.errors.append(str(record))


class DirectoryOrganizer:
    """Copies media files from input roots into a dated tree without clobbering."""

    def __init__(
        self,
        config: Config,
        output_root: Optional[Union[str, Path]] = None,
        log: Optional[logging.Logger] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Initialize organizer with configuration.

        Args:
            config: Configuration instance
            output_root: Output root, overrides the configured one
            log: Logger receiving per-file messages, defaults to the module logger
            stop_event: Set to stop the run before the next file
        """
        self.config = config
        output_root = output_root or config.get_output_root()
        if not output_root:
            raise ConfigError("Output directory not configured")

        self.output_root = Path(output_root).expanduser().absolute()
        self.logger = log or logger
        self.stop_event = stop_event
        self.dry_run = config.is_dry_run()
        self.verify_copies = config.should_verify_copies()
        self.extensions = frozenset(config.get_extensions())

        self.scanner = DirectoryScanner()
        try:
            self.builder = DestinationBuilder(self.output_root, config.get_month_locale())
        except ValueError as e:
            raise ConfigError(str(e)) from e
        self.resolver = CollisionResolver(config.get_compare_chunk_size())

        self.progress = Progress()
        # Dry run destinations, mapped to their source file
        self.planned: Dict[Path, Path] = {}

    @property
    def cancelled(self) -> bool:
        """Whether the stop event has been set."""
        return self.stop_event is not None and self.stop_event.is_set()

    def count_files(self, input_roots: Iterable[Union[str, Path]]) -> int:
        """Count the files a run over ``input_roots`` will process."""
        return self.scanner.count_files(input_roots)

    def check_free_space(self) -> Optional[str]:
        """
        Compare free space at the output root with the configured minimum.

        Returns:
            Warning message when free space is below the minimum, else None
        """
        minimum = self.config.get_min_free_space_mb() * 1024 * 1024
        if minimum <= 0:
            return None

        available = get_available_space(self.output_root)
        if available < minimum:
            return (
                f"Low disk space at {self.output_root}: "
                f"need {format_bytes(minimum)}, have {format_bytes(available)}"
            )
        return None

    def iter_outcomes(
        self,
        input_roots: Iterable[Union[str, Path]],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Iterator[OutcomeRecord]:
        """
        Process every input root and yield one record per file.

        Hidden files yield a SKIPPED_HIDDEN record but, like in the counting
        pre-pass, do not advance the progress counter.

        Args:
            input_roots: Input root directories, processed in order
            progress_callback: Receives a Progress snapshot after every counted file

        Yields:
            OutcomeRecord for every discovered file and unusable directory
        """
        roots = [Path(root).expanduser() for root in input_roots]
        total = self.count_files(roots)
        processed = 0
        self.planned = {}
        self._publish(Progress(0, total), progress_callback)
        self.logger.info(f"{'DRY RUN: ' if self.dry_run else ''}Found {total:,} files in {len(roots)} directories")

        for root in roots:
            if self.cancelled:
                break
            self.logger.info(f"Processing {root}")

            for event in self.scanner.walk(root):
                if self.cancelled:
                    self.logger.warning("Run cancelled")
                    return

                record = self.process_event(event)
                if self._counts_toward_progress(event):
                    processed += 1
                    self._publish(Progress(processed, total), progress_callback)
                    if processed % 50 == 0:
                        self.logger.info(f"Progress: {processed:,}/{total:,} ({self.progress.percentage:.1f}%)")
                yield record

            self.logger.info(f"Done processing {root}")

    def organize(
        self,
        input_roots: Iterable[Union[str, Path]],
        progress_callback: Optional[ProgressCallback] = None,
        outcome_callback: Optional[Callable[[OutcomeRecord], None]] = None,
    ) -> Dict[str, Any]:
        """
        Run over all input roots and collect the results.

        Args:
            input_roots: Input root directories
            progress_callback: Receives Progress snapshots
            outcome_callback: Receives every OutcomeRecord

        Returns:
            Dictionary with run results
        """
        roots = [str(root) for root in input_roots]
        stats = OrganizeStats()
        start_time = time.time()

        self.logger.info(
            f"{'DRY RUN: ' if self.dry_run else ''}Organizing {len(roots)} directories into {self.output_root}"
        )

        for record in self.iter_outcomes(roots, progress_callback):
            stats.add(record)
            if outcome_callback:
                outcome_callback(record)

        stats.total_files = self.progress.total
        stats.processed_files = self.progress.processed
        results = self._build_results(stats, roots)

        elapsed = time.time() - start_time
        self.logger.info(
            f"{'DRY RUN: ' if self.dry_run else ''}Organizing complete in {elapsed:.1f}s: "
            f"{results['copied_files']:,} copied, "
            f"{results['duplicate_files']:,} duplicates, "
            f"{results['failed_files']:,} failed, "
            f"{format_bytes(results['copied_size'])}"
        )
        return results

    def process_event(self, event: ScanEvent) -> OutcomeRecord:
        """Turn one walker event into an outcome record."""
        if isinstance(event, FileEntry):
            return self.process_file(event)
        if isinstance(event, MissingDirectory):
            return OutcomeRecord(
                ProcessingOutcome.SKIPPED_MISSING_DIRECTORY, event.path,
                reason="directory does not exist",
            )
        # UnreadableDirectory and UnreadableFile
        return OutcomeRecord(ProcessingOutcome.ERROR, event.path, reason=event.reason)

    def process_file(self, entry: FileEntry) -> OutcomeRecord:
        """
        Classify, place and copy one file.

        Never raises for per-file problems; they become ERROR records.
        """
        if entry.hidden:
            self.logger.debug(f"Skipping hidden file {entry.path}")
            return OutcomeRecord(ProcessingOutcome.SKIPPED_HIDDEN, entry.path)

        if entry.extension.lower() not in self.extensions:
            self.logger.info(f"Skipping {entry.path}")
            return OutcomeRecord(
                ProcessingOutcome.SKIPPED_EXTENSION, entry.path,
                reason=f"extension '{entry.extension}' not allowed",
            )

        self.logger.info(f"Processing {entry.path}")
        try:
            destination = self.builder.build(entry)
        except (OverflowError, ValueError, OSError) as e:
            self.logger.error(f"Unusable timestamps on {entry.path}: {e}")
            return OutcomeRecord(ProcessingOutcome.ERROR, entry.path, reason=str(e))
        target = self.builder.path(destination)

        error = validate_file_name(destination.file_name)
        if error:
            self.logger.error(f"Invalid file name {destination.file_name}; error={error}")
            return OutcomeRecord(ProcessingOutcome.SKIPPED_INVALID_NAME, entry.path, target, reason=error)

        try:
            if not self.dry_run:
                self.builder.ensure(target.parent)

            resolution = self.resolver.resolve(entry.path, target, self.planned)
            target = resolution.path
            if resolution.duplicate:
                self.logger.info(
                    f"Skipping file {entry.path} as it already exists in destination with the same content."
                )
                return OutcomeRecord(ProcessingOutcome.SKIPPED_DUPLICATE, entry.path, resolution.path)

            if resolution.renamed:
                error = validate_file_name(resolution.path.name)
                if error:
                    self.logger.error(f"Invalid file name {resolution.path.name}; error={error}")
                    return OutcomeRecord(
                        ProcessingOutcome.SKIPPED_INVALID_NAME, entry.path, resolution.path, reason=error
                    )

            if self.dry_run:
                self.logger.info(f"DRY RUN: would copy {entry.path} to {resolution.path}")
                self.planned[resolution.path] = entry.path
                return OutcomeRecord(ProcessingOutcome.COPIED, entry.path, resolution.path, size=entry.size)

            size = safe_copy_file(entry.path, resolution.path, verify=self.verify_copies)
        except OSError as e:
            self.logger.error(f"Failed to copy {entry.path} -> {target}: {e}")
            return OutcomeRecord(ProcessingOutcome.ERROR, entry.path, target, reason=str(e))

        self.logger.info(f"Copied {entry.path} to {resolution.path}")
        return OutcomeRecord(ProcessingOutcome.COPIED, entry.path, resolution.path, size=size)

    def _counts_toward_progress(self, event: ScanEvent) -> bool:
        if isinstance(event, FileEntry):
            return not event.hidden
        return not isinstance(event, (MissingDirectory, UnreadableDirectory))

    def _publish(self, progress: Progress, callback: Optional[ProgressCallback]) -> None:
        # Readers on other threads only ever see a complete snapshot
        self.progress = progress
        if callback:
            callback(progress)

    def _build_results(self, stats: OrganizeStats, roots: List[str]) -> Dict[str, Any]:
        counts = stats.counts
        return {
            'dry_run': self.dry_run,
            'timestamp': get_current_timestamp(),
            'input_roots': roots,
            'output_root': str(self.output_root),
            'total_files': stats.total_files,
            'processed_files': stats.processed_files,
            'copied_files': counts[ProcessingOutcome.COPIED],
            'duplicate_files': counts[ProcessingOutcome.SKIPPED_DUPLICATE],
            'skipped_extension': counts[ProcessingOutcome.SKIPPED_EXTENSION],
            'skipped_hidden': counts[ProcessingOutcome.SKIPPED_HIDDEN],
            'invalid_names': counts[ProcessingOutcome.SKIPPED_INVALID_NAME],
            'missing_directories': counts[ProcessingOutcome.SKIPPED_MISSING_DIRECTORY],
            'failed_files': counts[ProcessingOutcome.ERROR],
            'copied_size': stats.copied_size,
            'errors': stats.errors,
            'failures': [str(record) for record in stats.failures],
            'cancelled': self.cancelled,
            'success': not stats.failures and not counts[ProcessingOutcome.SKIPPED_MISSING_DIRECTORY],
        }
