"""Append-only byte sinks for decoded samples."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class SampleSink(Protocol):
    """Anything that accepts packed sample bytes in arrival order."""

    def append(self, data: bytes) -> None: ...


class FileSampleSink:
    """Appends packed samples to a file, creating parent directories.

    Each append opens the file in append mode, so an existing capture is
    extended rather than replaced.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, data: bytes) -> None:
        with self.path.open("ab") as f:
            _ = f.write(data)

    def __repr__(self) -> str:
        return f"FileSampleSink({self.path})"


class MemorySampleSink:
    """Collects packed samples in memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data = bytearray()

    def append(self, data: bytes) -> None:
        # Appends arrive from worker threads
        with self._lock:
            self._data.extend(data)

    @property
    def data(self) -> bytes:
        with self._lock:
            return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MemorySampleSink({len(self._data)} bytes)"
