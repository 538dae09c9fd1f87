"""Count, append and prune over the shared guest accounts file."""

from __future__ import annotations

import json
import logging
import math
import os
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterator

from guestlog.models.account import Record
from guestlog.store.errors import InvalidJsonError, MalformedRecordError
from guestlog.store.working_file import WorkingFile

logger = logging.getLogger(__name__)

MAX_AGE_DAYS = 25
MAX_AGE_SECS = MAX_AGE_DAYS * 24 * 60 * 60

_WHITESPACE = re.compile(r"[ \t\n\r]*")
# Characters allowed right after a number, true, false or null.
_SCALAR_END = frozenset(" \t\n\r\"[{")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text}")
    return value


_decoder = json.JSONDecoder(parse_float=_parse_float, parse_constant=_reject_constant)


def iter_json_values(text: str) -> Iterator[Any]:
    """Yield each value of a whitespace-separated stream of JSON documents.

    Raises ``InvalidJsonError`` at the first value that fails to parse;
    values before it have already been yielded.
    """
    end = len(text)
    idx = _WHITESPACE.match(text, 0).end()
    while idx < end:
        try:
            value, idx = _decoder.raw_decode(text, idx)
        except (ValueError, RecursionError) as e:
            raise InvalidJsonError(str(e)) from e
        if idx < end and not isinstance(value, (dict, list, str)) and text[idx] not in _SCALAR_END:
            raise InvalidJsonError(f"unexpected character {text[idx]!r} after value at {idx}")
        yield value
        idx = _WHITESPACE.match(text, idx).end()


def encode_line(value: Any) -> bytes:
    """Compact JSON text of ``value`` plus the terminating newline."""
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    try:
        return (text + "\n").encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates from \ud800-style escapes.
        raise InvalidJsonError(str(e)) from e


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _sync(handle: BinaryIO) -> None:
    handle.flush()
    os.fsync(handle.fileno())


@dataclass(frozen=True)
class PruneResult:
    kept: int
    removed: int


class GuestLog:
    """Serialized access to the guest accounts file.

    Every operation holds one process-wide lock for its whole duration and
    works on a freshly opened handle, so a prune's truncate-and-rewrite is
    never observed half done by a concurrent count or append.
    """

    def __init__(self, working_file: WorkingFile, atomic_append: bool = False) -> None:
        self._file = working_file
        self._atomic_append = atomic_append
        self._lock = threading.Lock()

    def count(self) -> int:
        """Number of lines in the file."""
        with self._lock, self._file.open() as handle:
            handle.seek(0)
            total = 0
            for raw in handle:
                raw.decode("utf-8")
                total += 1
        logger.debug("Counted %d guest account(s)", total)
        return total

    def append(self, payload: str) -> int:
        """Append every JSON value in ``payload`` as one compact line.

        In streaming mode, values preceding a malformed one stay written.
        In atomic mode the whole payload is validated before writing.
        Returns the number of lines written.
        """
        with self._lock, self._file.open() as handle:
            handle.seek(0, os.SEEK_END)
            if self._atomic_append:
                lines = [encode_line(value) for value in iter_json_values(payload)]
                handle.writelines(lines)
                written = len(lines)
            else:
                written = 0
                for value in iter_json_values(payload):
                    handle.write(encode_line(value))
                    written += 1
            _sync(handle)
        logger.info("Appended %d guest account(s)", written)
        return written

    def prune(self, now: int | None = None) -> PruneResult:
        """Drop records whose identifier is ``MAX_AGE_SECS`` old or older.

        The full scan completes before the file is touched, so a malformed
        record leaves the content unchanged.
        """
        current_time = int(time.time()) if now is None else now

        with self._lock, self._file.open() as handle:
            handle.seek(0)
            kept: list[str] = []
            removed = 0
            for line_number, raw in enumerate(handle, start=1):
                line = _strip_newline(raw.decode("utf-8"))
                try:
                    created_at = Record(line).created_at()
                except ValueError as e:
                    raise MalformedRecordError(line_number, str(e)) from e
                if current_time - created_at < MAX_AGE_SECS:
                    kept.append(line)
                else:
                    removed += 1

            handle.truncate(0)
            handle.seek(0)
            handle.writelines((line + "\n").encode("utf-8") for line in kept)
            _sync(handle)

        logger.info("Pruned %d guest account(s), kept %d", removed, len(kept))
        return PruneResult(kept=len(kept), removed=removed)
