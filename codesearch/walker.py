"""Repository tree traversal producing per-line records."""

from __future__ import annotations

import os
from typing import BinaryIO, Callable, Iterator

from .classifier import is_supported
from .documents import build_code_line
from .errors import FileOpenError, StoreError
from .logging import get_logger
from .models import CodeLine, WalkStats

Emit = Callable[[CodeLine], None]

_logger = get_logger("walker")


def _iter_lines(handle: BinaryIO) -> Iterator[str]:
    # Split on "\n" only and drop a single trailing "\r", without any cap on
    # line length.
    for raw in handle:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        yield raw.decode("utf-8", errors="replace")


def _iter_files(root: str) -> Iterator[str]:
    """Yield regular files under *root* depth-first in lexical order.

    Entries that cannot be listed or stat'ed are skipped.
    """
    try:
        with os.scandir(root) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        _logger.debug("skipping %s: %s", root, exc)
        return

    for entry in entries:
        path = os.path.join(root, entry.name)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file()
        except OSError as exc:
            _logger.debug("skipping %s: %s", path, exc)
            continue
        if is_dir:
            yield from _iter_files(path)
        elif is_file:
            yield path


class TreeWalker:
    """Reads every eligible file under a tree and emits one record per line."""

    def __init__(self, classifier: Callable[[str], bool] = is_supported) -> None:
        self._classifier = classifier

    def walk(
        self,
        root: str | os.PathLike[str],
        repository: str,
        emit: Emit,
        stats: WalkStats | None = None,
    ) -> WalkStats:
        """Emit records for all eligible files under *root*.

        Raises :class:`FileOpenError` when an eligible file cannot be opened,
        which ends the walk. A :class:`StoreError` raised by *emit* is logged
        and the walk moves on to the next line. Counts accumulate into *stats*
        when given, so they survive an aborted walk.
        """
        if stats is None:
            stats = WalkStats()
        for path in _iter_files(os.fspath(root)):
            if not self._classifier(path):
                continue
            try:
                handle = open(path, "rb")
            except OSError as exc:
                raise FileOpenError(path, exc.strerror or str(exc)) from exc
            with handle:
                stats.files += 1
                self._walk_file(handle, path, repository, emit, stats)
        return stats

    @staticmethod
    def _walk_file(
        handle: BinaryIO, path: str, repository: str, emit: Emit, stats: WalkStats
    ) -> None:
        try:
            for line_number, content in enumerate(_iter_lines(handle), start=1):
                stats.lines += 1
                record = build_code_line(repository, path, line_number, content)
                try:
                    emit(record)
                except StoreError as exc:
                    stats.failed_lines += 1
                    _logger.error("indexing error: %s:%d: %s", path, line_number, exc)
        except OSError as exc:
            # A read error ends this file only.
            _logger.warning("read error in %s: %s", path, exc)


__all__ = ["Emit", "TreeWalker"]
