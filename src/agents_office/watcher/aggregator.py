"""Per-notification batch assembly.

For every coalesced change notification the aggregator tails each affected
log file, parses and classifies the new lines, and hands one BatchUpdate to
the event sink.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from agents_office.events.models import APP_EVENT_TOPIC, EventSink, batch_update

from .classifier import DEFAULT_ROUTER, ToolRouter, classify
from .log_parser import LOG_EXTENSIONS, parse_line
from .models import MAX_TASK_LENGTH, Batch
from .tailer import FileTailer, is_regular_file

logger = logging.getLogger(__name__)


class BatchAggregator:
    """Turns a set of changed paths into at most one BatchUpdate.

    Attributes:
        tailer: File tailer owning the per-file read positions.
        sink: Event sink receiving BatchUpdate payloads; None to only return batches.
        router: Tool routing table used for classification.
        max_task_length: Cap applied to ``current_task``.
    """

    def __init__(
        self,
        tailer: FileTailer,
        sink: EventSink | None = None,
        router: ToolRouter = DEFAULT_ROUTER,
        max_task_length: int = MAX_TASK_LENGTH,
    ):
        self.tailer = tailer
        self.sink = sink
        self.router = router
        self.max_task_length = max_task_length

    def process(self, paths: Iterable[str | Path]) -> Batch | None:
        """Collect new entries from ``paths`` and emit them as one batch.

        Paths without a recognized extension, or that are not regular files
        right now, are ignored. A failure on one file is logged and the
        remaining files are still processed.

        Args:
            paths: Paths that may have new content.

        Returns:
            The emitted batch, or None if no new entry was parsed.
        """
        batch = Batch()

        for path in _unique(paths):
            if path.suffix.lower() not in LOG_EXTENSIONS or not is_regular_file(path):
                continue
            try:
                self._collect(path, batch)
            except Exception as e:
                logger.error(
                    "Failed to process log file",
                    extra={"path": str(path), "error": str(e), "error_type": type(e).__name__},
                )

        if batch.is_empty():
            return None

        logger.debug(
            "Emitting batch",
            extra={"log_count": len(batch.logs), "agent_count": len(batch.agents)},
        )
        if self.sink is not None:
            payload = batch.to_payload()
            self.sink.emit(APP_EVENT_TOPIC, batch_update(payload["logs"], payload["agents"]))
        return batch

    def _collect(self, path: Path, batch: Batch) -> None:
        for line in self.tailer.read_new_lines(path):
            entry = parse_line(line, path)
            if entry is None:
                continue
            batch.add(entry, classify(entry, self.router, self.max_task_length))


def _unique(paths: Iterable[str | Path]) -> list[Path]:
    seen: set[Path] = set()
    ordered: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path not in seen:
            seen.add(path)
            ordered.append(path)
    return ordered
