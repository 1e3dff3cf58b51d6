"""Core data models shared across codesearch components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


@dataclass(frozen=True)
class RepoSpec:
    """A configured repository: local short name and where to fetch it from."""

    name: str
    url: str


@dataclass(frozen=True)
class CodeLine:
    """One indexed source line."""

    repository: str
    file_path: str
    line: int
    content: str
    function: str = ""

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "repository": self.repository,
            "file_path": self.file_path,
            "line": self.line,
            "content": self.content,
        }
        if self.function:
            document["function"] = self.function
        return document


@dataclass
class WalkStats:
    """Counters collected while walking one repository tree."""

    files: int = 0
    lines: int = 0
    failed_lines: int = 0

    @property
    def indexed_lines(self) -> int:
        return self.lines - self.failed_lines


class RepoStatus(Enum):
    INDEXED = "indexed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RepoOutcome:
    """Result of processing a single repository within a session."""

    repo: RepoSpec
    status: RepoStatus
    stats: WalkStats = field(default_factory=WalkStats)
    error: str | None = None


@dataclass
class SessionReport:
    """Aggregated outcome of an indexing session."""

    index: str
    repositories: List[RepoOutcome] = field(default_factory=list)

    @property
    def indexed_lines(self) -> int:
        return sum(outcome.stats.indexed_lines for outcome in self.repositories)

    @property
    def failed_lines(self) -> int:
        return sum(outcome.stats.failed_lines for outcome in self.repositories)

    def count(self, status: RepoStatus) -> int:
        return sum(1 for outcome in self.repositories if outcome.status is status)

    def summary(self) -> str:
        return (
            f"{self.count(RepoStatus.INDEXED)} indexed, "
            f"{self.count(RepoStatus.SKIPPED)} skipped, "
            f"{self.count(RepoStatus.FAILED)} failed; "
            f"{self.indexed_lines} lines in '{self.index}'"
            + (f" ({self.failed_lines} rejected)" if self.failed_lines else "")
        )
