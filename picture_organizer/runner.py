"""Background execution of an organizing run."""

import logging
import queue
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import Config
from .organizer import DirectoryOrganizer, OutcomeRecord, Progress

logger = logging.getLogger(__name__)


class BackgroundRun(threading.Thread):
    """Worker thread running one organizer pass off the calling thread.

    Messages pushed to ``messages``:
        ('progress', Progress)
        ('outcome', OutcomeRecord)
        ('complete', results dict)
        ('error', message)
    """

    def __init__(
        self,
        config: Config,
        input_roots: List[Union[str, Path]],
        output_root: Optional[Union[str, Path]] = None,
        messages: Optional[queue.Queue] = None,
        log: Optional[logging.Logger] = None,
    ):
        super().__init__(daemon=True, name="picture-organizer")
        self.input_roots = list(input_roots)
        self.messages = messages if messages is not None else queue.Queue()
        self.stop_event = threading.Event()
        self.organizer = DirectoryOrganizer(config, output_root, log=log, stop_event=self.stop_event)
        self.results: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @property
    def progress(self) -> Progress:
        """Latest progress snapshot."""
        return self.organizer.progress

    def cancel(self) -> None:
        """Stop the run before the next file."""
        self.stop_event.set()

    def run(self):
        """Execute the organizing run in the background thread."""
        try:
            self.results = self.organizer.organize(
                self.input_roots,
                progress_callback=self._on_progress,
                outcome_callback=self._on_outcome,
            )
            self.messages.put(('complete', self.results))
        except Exception as e:
            self.error = f"Processing error: {e}"
            logger.exception(self.error)
            self.messages.put(('error', self.error))

    def wait(self, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """Join the thread and return the results, None if it has not finished."""
        self.join(timeout)
        return None if self.is_alive() else self.results

    def _on_progress(self, progress: Progress) -> None:
        self.messages.put(('progress', progress))

    def _on_outcome(self, record: OutcomeRecord) -> None:
        self.messages.put(('outcome', record))
