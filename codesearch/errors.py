"""Error taxonomy for indexing runs."""

from __future__ import annotations

from enum import Enum


class Severity(Enum):
    """How far up the pipeline an error is allowed to travel."""

    FATAL = "fatal"
    REPOSITORY = "repository"
    LINE = "line"


class CodeSearchError(RuntimeError):
    """Base class for errors raised by codesearch components."""

    severity: Severity = Severity.FATAL


class SetupError(CodeSearchError):
    """Raised when the run cannot start: config, store client, workdir or index reset."""

    severity = Severity.FATAL


class FetchError(CodeSearchError):
    """Raised when a repository cannot be cloned or opened locally."""

    severity = Severity.REPOSITORY


class FileOpenError(CodeSearchError):
    """Raised when an eligible file cannot be opened during a walk."""

    severity = Severity.REPOSITORY

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot open {path}: {reason}")
        self.path = path


class StoreError(CodeSearchError):
    """Raised by store backends when a request is rejected or fails."""

    severity = Severity.LINE


def is_fatal(exc: BaseException) -> bool:
    """Return True when *exc* must abort the whole session."""
    if isinstance(exc, CodeSearchError):
        return exc.severity is Severity.FATAL
    return True


__all__ = [
    "CodeSearchError",
    "FetchError",
    "FileOpenError",
    "SetupError",
    "Severity",
    "StoreError",
    "is_fatal",
]
