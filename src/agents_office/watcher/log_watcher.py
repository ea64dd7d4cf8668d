"""Filesystem watching of the Claude Code log directories.

DirectoryWatcher wraps ``watchfiles.watch`` and yields one set of changed log
paths per debounce window. LogWatcher runs it on a background thread and
feeds every change set through the BatchAggregator.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, DefaultFilter, watch

from agents_office.events.models import APP_EVENT_TOPIC, EventSink, watcher_status
from agents_office.exceptions import WatcherError
from agents_office.paths import resolve_claude_home

from .aggregator import BatchAggregator
from .classifier import DEFAULT_ROUTER, ToolRouter
from .log_parser import LOG_EXTENSIONS
from .models import MAX_TASK_LENGTH
from .tailer import FileTailer

if TYPE_CHECKING:
    from agents_office.config import OfficeConfig

logger = logging.getLogger(__name__)


class LogFileFilter(DefaultFilter):
    """Accepts only recognized log files inside the watched subdirectories."""

    def __init__(self, log_dirs: list[Path]) -> None:
        super().__init__()
        self.log_dirs = [d.resolve() for d in log_dirs]

    def __call__(self, change: Change, path: str) -> bool:
        if not super().__call__(change, path):
            return False
        candidate = Path(path)
        if candidate.suffix.lower() not in LOG_EXTENSIONS:
            return False
        resolved = candidate.resolve()
        return any(resolved.is_relative_to(d) for d in self.log_dirs)


class DirectoryWatcher:
    """Coalesced change notifications for the log subdirectories of a root.

    The root is watched recursively so that subdirectories created after
    startup are picked up without re-subscribing; the filter keeps only
    log files below the configured subdirectories.

    Attributes:
        root: Directory being watched.
        log_dirs: Subdirectories whose log files are reported.
        debounce_ms: Maximum window over which raw events are grouped.
        step_ms: Quiet period that closes a window early.
        root_poll_interval: Seconds between checks while the root is missing.
    """

    def __init__(
        self,
        root: Path,
        subdirs: list[str],
        debounce_ms: int = 200,
        step_ms: int = 50,
        root_poll_interval: float = 2.0,
    ):
        self.root = root
        self.log_dirs = [root / name for name in subdirs]
        self.debounce_ms = debounce_ms
        self.step_ms = step_ms
        self.root_poll_interval = root_poll_interval

    def check_layout(self) -> None:
        """Log the directories that do not exist yet."""
        if not self.root.exists():
            logger.warning(f"Claude home directory does not exist: {self.root}")
            return
        for log_dir in self.log_dirs:
            if log_dir.is_dir():
                logger.info(f"Watching log directory: {log_dir}")
            else:
                logger.warning(f"Log directory does not exist yet: {log_dir}")

    def wait_for_root(self, stop_event: threading.Event) -> bool:
        """Block until the root exists.

        Returns:
            True once the root exists, False if stopped first.
        """
        while not self.root.is_dir():
            if stop_event.wait(self.root_poll_interval):
                return False
        return True

    def changes(self, stop_event: threading.Event) -> Iterator[list[Path]]:
        """Yield the changed log paths of each debounce window.

        A yielded list means "these files may have new content", not an exact
        diff. Paths are sorted so that batches are assembled in a stable order.

        Raises:
            WatcherError: If the notification source fails.
        """
        if not self.wait_for_root(stop_event):
            return

        try:
            for raw_changes in watch(
                self.root,
                watch_filter=LogFileFilter(self.log_dirs),
                debounce=self.debounce_ms,
                step=self.step_ms,
                stop_event=stop_event,
                recursive=True,
                raise_interrupt=False,
            ):
                paths = sorted(
                    {Path(path) for change, path in raw_changes if change != Change.deleted}
                )
                if paths:
                    yield paths
        except (OSError, RuntimeError) as e:
            raise WatcherError(f"Watching {self.root} failed: {e}") from e


class LogWatcher:
    """Background worker that turns log file changes into event sink batches.

    One daemon thread waits on the DirectoryWatcher and processes each
    coalesced notification to completion before waiting again. ``stop()``
    sets the stop event, which is observed between notifications.

    Example:
        >>> watcher = LogWatcher(Path.home() / ".claude", bus)
        >>> watcher.start()
        >>> ...
        >>> watcher.stop()
    """

    def __init__(
        self,
        root: Path,
        sink: EventSink,
        subdirs: tuple[str, ...] = ("debug", "projects"),
        debounce_ms: int = 200,
        step_ms: int = 50,
        root_poll_interval: float = 2.0,
        router: ToolRouter = DEFAULT_ROUTER,
        max_task_length: int = MAX_TASK_LENGTH,
    ):
        self.root = root
        self.sink = sink
        self.tailer = FileTailer()
        self.aggregator = BatchAggregator(self.tailer, sink, router, max_task_length)
        self.directory_watcher = DirectoryWatcher(
            root, list(subdirs), debounce_ms, step_ms, root_poll_interval
        )
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._failed = False

    @classmethod
    def from_config(cls, config: OfficeConfig, sink: EventSink) -> LogWatcher:
        """Build a watcher from an OfficeConfig.

        Raises:
            ClaudeHomeNotFoundError: If the root directory cannot be resolved.
        """
        return cls(
            root=resolve_claude_home(config.claude_home),
            sink=sink,
            subdirs=(config.debug_subdir, config.projects_subdir),
            debounce_ms=config.debounce_ms,
            step_ms=config.step_ms,
            root_poll_interval=config.root_poll_interval,
            router=config.build_router(),
            max_task_length=config.max_task_length,
        )

    # ============================================================================
    # Lifecycle Methods
    # ============================================================================

    def start(self) -> None:
        """Announce the watched root and start the background thread.

        Raises:
            RuntimeError: If the watcher is already running
        """
        if self.is_running():
            raise RuntimeError("LogWatcher is already running")

        self._stop_event.clear()
        self._failed = False
        self.directory_watcher.check_layout()
        self.sink.emit(APP_EVENT_TOPIC, watcher_status(True, str(self.root)))

        self._thread = threading.Thread(target=self.run, daemon=True, name="LogWatcher")
        self._thread.start()
        logger.info(f"LogWatcher started for {self.root}")

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to stop and wait for the thread to exit."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("LogWatcher thread did not stop within timeout")
            self._thread = None
        logger.info("LogWatcher stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def failed(self) -> bool:
        """True once the notification source has failed; the watcher stays stopped."""
        return self._failed

    # ============================================================================
    # Core Loop
    # ============================================================================

    def run(self) -> None:
        """Process coalesced notifications until stopped or the source fails."""
        logger.info("Watch loop started")
        try:
            for paths in self.directory_watcher.changes(self._stop_event):
                self.process_paths(paths)
                if self._stop_event.is_set():
                    break
        except WatcherError as e:
            self._failed = True
            logger.error(f"Watch loop terminated: {e}")
            self.sink.emit(APP_EVENT_TOPIC, watcher_status(False, str(self.root)))
        logger.info("Watch loop exited")

    def process_paths(self, paths: list[Path]) -> None:
        """Run one aggregation pass; per-file errors never end the loop."""
        try:
            self.aggregator.process(paths)
        except Exception as e:
            logger.error(
                "Batch processing failed",
                extra={"path_count": len(paths), "error": str(e), "error_type": type(e).__name__},
            )
