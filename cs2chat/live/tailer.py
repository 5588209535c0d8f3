# cs2chat/live/tailer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from cs2chat.app.logging_setup import log_event
from cs2chat.contracts import LogLine


@dataclass
class TailState:
    last_known_size: int = 0


class IncrementalTailer:
    """
    Read only what was appended to a growing file since the last check.

    check() is one notification cycle:
      1) size grew   -> read [last_known_size, size), split into lines, call on_lines
      2) size shrank -> file was truncated/rotated; restart from offset 0, emit nothing
      3) unchanged or unreadable -> nothing

    Pre-existing content is skipped: start() baselines at the current size.
    With carry_partial_lines=False an unterminated last line is dropped
    (the old console behavior); otherwise it is held until its newline arrives.
    """

    def __init__(
        self,
        path: str | Path,
        on_lines: Callable[[Sequence[LogLine]], None],
        *,
        encoding: str = "utf-8",
        carry_partial_lines: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(path)
        self.on_lines = on_lines
        self.encoding = encoding
        self.carry_partial_lines = carry_partial_lines
        self.logger = logger
        self.state = TailState()
        self._pending = b""
        self._pending_offset = 0
        self._unavailable = False

    def start(self) -> None:
        # FileNotFoundError here is fatal for the caller.
        self.state.last_known_size = self.path.stat().st_size
        self._reset_pending()
        self._unavailable = False
        log_event(
            self.logger,
            logging.INFO,
            "tail_start",
            log_path=str(self.path),
            baseline=self.state.last_known_size,
        )

    def read_range(self, start: int, end: int) -> bytes:
        with self.path.open("rb") as f:
            f.seek(start)
            return f.read(end - start)

    def check(self) -> List[LogLine]:
        try:
            size = self.path.stat().st_size
        except OSError as e:
            if not self._unavailable:
                self._unavailable = True
                log_event(self.logger, logging.WARNING, "log_file_unavailable", log_path=str(self.path), error=str(e))
            return []
        if self._unavailable:
            self._unavailable = False
            log_event(self.logger, logging.INFO, "log_file_available", log_path=str(self.path), size=size)

        start = self.state.last_known_size
        if size < start:
            self.state.last_known_size = 0
            self._reset_pending()
            log_event(self.logger, logging.WARNING, "log_truncated", previous_size=start, size=size)
            return []
        if size == start:
            return []

        try:
            data = self.read_range(start, size)
        except OSError as e:
            log_event(self.logger, logging.WARNING, "log_read_failed", start=start, end=size, error=str(e))
            return []
        self.state.last_known_size = size

        lines = self._split(data, start)
        if lines:
            self.on_lines(lines)
        return lines

    def _split(self, data: bytes, start: int) -> List[LogLine]:
        if self._pending:
            data = self._pending + data
            offset = self._pending_offset
        else:
            offset = start
        self._reset_pending()

        out: List[LogLine] = []
        pieces = data.split(b"\n")
        tail = pieces.pop()  # b"" when data ends with a newline
        for raw in pieces:
            text = raw.rstrip(b"\r").decode(self.encoding, errors="replace")
            out.append(LogLine(text=text, offset=offset))
            offset += len(raw) + 1

        if tail and self.carry_partial_lines:
            self._pending = tail
            self._pending_offset = offset
        elif tail:
            log_event(self.logger, logging.DEBUG, "partial_line_dropped", offset=offset, size=len(tail))
        return out

    def _reset_pending(self) -> None:
        self._pending = b""
        self._pending_offset = 0
