from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Callable, Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class ChangeWatcher(Protocol):
    async def run(self, on_change: Callable[[], object], stop: asyncio.Event) -> None:
        ...


async def _wait_or_stop(stop: asyncio.Event, timeout: float) -> bool:
    try:
        await asyncio.wait_for(stop.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


class PollingWatcher:
    def __init__(self, interval_sec: float = 0.5) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be > 0")
        self.interval_sec = float(interval_sec)

    async def run(self, on_change: Callable[[], object], stop: asyncio.Event) -> None:
        while not stop.is_set():
            on_change()
            if await _wait_or_stop(stop, self.interval_sec):
                return


class _LogFileHandler(FileSystemEventHandler):
    """Forwards events for one file name from the observer thread to the loop."""

    def __init__(self, filename: str, wake: Callable[[], None]) -> None:
        self.filename = os.path.normcase(filename)
        self.wake = wake

    def _matches(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and os.path.normcase(os.path.basename(os.fsdecode(p))) == self.filename for p in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if self._matches(event):
            self.wake()


class FileEventWatcher:
    """
    Native filesystem notifications via watchdog, plus a slow fallback tick
    for filesystems that never report modifications (network shares, Proton prefixes).
    """

    def __init__(self, path: str | Path, fallback_interval_sec: float = 0.5) -> None:
        self.path = Path(path)
        self.fallback_interval_sec = float(fallback_interval_sec)

    async def run(self, on_change: Callable[[], object], stop: asyncio.Event) -> None:
        loop = asyncio.get_running_loop()
        wakeup = asyncio.Event()

        handler = _LogFileHandler(self.path.name, lambda: loop.call_soon_threadsafe(wakeup.set))
        observer = Observer()
        observer.schedule(handler, str(self.path.parent), recursive=False)
        observer.start()
        try:
            while not stop.is_set():
                # Several events for one write collapse into one check.
                wakeup.clear()
                on_change()
                waiter = asyncio.ensure_future(wakeup.wait())
                stopper = asyncio.ensure_future(stop.wait())
                try:
                    await asyncio.wait(
                        {waiter, stopper},
                        timeout=self.fallback_interval_sec,
                        return_when=asyncio.FIRST_COMPLETED,
                    )
                finally:
                    waiter.cancel()
                    stopper.cancel()
        finally:
            observer.stop()
            await asyncio.to_thread(observer.join)


WATCH_MODES = ("poll", "events")


def make_watcher(mode: str, path: str | Path, interval_sec: float) -> ChangeWatcher:
    mode = (mode or "poll").lower().strip()
    if mode == "poll":
        return PollingWatcher(interval_sec=interval_sec)
    if mode == "events":
        return FileEventWatcher(path, fallback_interval_sec=interval_sec)
    raise ValueError(f"Unknown watch mode: {mode}")
