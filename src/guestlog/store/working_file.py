"""Handle provider for the single guest accounts file."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO


class WorkingFile:
    """Owns the log path and hands out a fresh handle per operation."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def open(self) -> BinaryIO:
        """Open for reading and appending, creating the file if absent.

        Writes always land at end of file; readers must seek first.
        """
        return open(self._path, "a+b")
