"""Incremental file tailing with truncation and rotation detection.

This module reads only the bytes appended to a log file since the previous
call, using a per-file byte offset. Lines are only handed out once their
newline has been written; a trailing fragment is carried over and completed
on a later read, so content split across two writes is neither lost nor
duplicated.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from .models import TailerState

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class FileTailer:
    """Reads newly appended, complete lines from log files.

    The tailer owns one TailerState per path. Access to the state map is
    serialized with a lock because a single notification can reference
    several paths and the watcher thread is not the only possible caller.

    Attributes:
        _states: Tailing state keyed by file path.
        _lock: Guards ``_states``.
    """

    def __init__(self) -> None:
        self._states: dict[Path, TailerState] = {}
        self._lock = threading.Lock()

    def get_state(self, path: str | Path) -> TailerState | None:
        """Return a copy of the recorded state for ``path``, if any."""
        with self._lock:
            state = self._states.get(Path(path))
            if state is None:
                return None
            return TailerState(state.byte_offset, state.partial_line, state.inode)

    def tracked_paths(self) -> list[Path]:
        with self._lock:
            return list(self._states)

    def read_new_lines(self, path: str | Path) -> list[str]:
        """Read complete lines appended to ``path`` since the last call.

        If the file is now shorter than the recorded offset, or has been
        replaced by a different file, reading restarts at offset 0 and any
        carried fragment is discarded. Open/read failures are treated as
        transient: nothing is returned and the state is left untouched.

        Args:
            path: Log file to read.

        Returns:
            New lines, in file order, without line terminators.
        """
        log_path = Path(path)

        with self._lock:
            previous = self._states.get(log_path) or TailerState()

            try:
                stat_result = log_path.stat()
            except OSError as e:
                logger.debug(f"Cannot stat {log_path}: {e}")
                return []

            start_offset = previous.byte_offset
            partial = previous.partial_line

            if stat_result.st_size < start_offset:
                logger.warning(
                    f"Log file {log_path} was truncated "
                    f"(offset {start_offset} > size {stat_result.st_size})"
                )
                start_offset, partial = 0, ""
            elif previous.inode is not None and previous.inode != stat_result.st_ino:
                logger.info(f"Log rotation detected for {log_path} (inode changed)")
                start_offset, partial = 0, ""

            try:
                lines, partial, new_offset = self._read_from(log_path, start_offset, partial)
            except OSError as e:
                logger.warning(f"OS error reading {log_path}: {e}")
                return []

            if new_offset < start_offset:
                logger.warning(
                    f"Stream position for {log_path} moved backwards "
                    f"({start_offset} -> {new_offset})"
                )

            self._states[log_path] = TailerState(
                byte_offset=new_offset,
                partial_line=partial,
                inode=stat_result.st_ino,
            )

        if lines:
            logger.debug(
                f"Read {len(lines)} new lines from {log_path} "
                f"(offset {start_offset} -> {new_offset})"
            )
        return lines

    @staticmethod
    def _read_from(path: Path, offset: int, partial: str) -> tuple[list[str], str, int]:
        """Read forward from ``offset``.

        The offset returned is the stream position after the last read rather
        than the size seen by ``stat``, so bytes appended by a concurrent writer
        in the meantime are picked up next time instead of being skipped.
        """
        pending = _encode_partial(partial)
        lines: list[str] = []

        with path.open("rb") as f:
            f.seek(offset)
            for raw in f:
                if not raw.endswith(b"\n"):
                    pending += raw
                    break
                data = pending + raw[:-1]
                pending = b""
                if data.endswith(b"\r"):
                    data = data[:-1]
                lines.append(data.decode(ENCODING, errors="replace"))
            new_offset = f.tell()

        return lines, _decode_partial(pending), new_offset


def _encode_partial(partial: str) -> bytes:
    return partial.encode(ENCODING, errors="surrogateescape")


def _decode_partial(data: bytes) -> str:
    # surrogateescape keeps a multi-byte character cut in half recoverable
    return data.decode(ENCODING, errors="surrogateescape")


def is_regular_file(path: str | Path) -> bool:
    """True if ``path`` currently exists and is a regular file."""
    try:
        return Path(path).is_file()
    except OSError:
        return False
