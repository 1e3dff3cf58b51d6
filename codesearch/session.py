"""Indexing session: reset the destination index, then fetch and walk each repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol

from .config import IndexerSettings
from .errors import CodeSearchError, SetupError, StoreError, is_fatal
from .git.fetcher import RepoFetcher
from .logging import get_logger
from .models import CodeLine, RepoOutcome, RepoSpec, RepoStatus, SessionReport
from .stores import IndexStore, create_store
from .walker import TreeWalker


class Fetcher(Protocol):
    def ensure_local(self, repo: RepoSpec, base_path: Path) -> Path:
        ...


class IndexingSession:
    """Rebuilds one destination index from a list of repositories.

    Setup failures raise :class:`SetupError`; anything that goes wrong for a
    single repository or line is logged and recorded in the report.
    """

    def __init__(
        self,
        store: IndexStore,
        fetcher: Fetcher,
        *,
        base_path: Path,
        index_name: str,
        walker: TreeWalker | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.base_path = Path(base_path)
        self.index_name = index_name
        self.walker = walker or TreeWalker()
        self.logger = get_logger("session")

    def __enter__(self) -> "IndexingSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the store connection."""
        self.store.close()

    def prepare(self) -> None:
        """Create the working directory and drop any existing index."""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SetupError(f"cannot create working directory {self.base_path}: {exc}") from exc

        try:
            exists = self.store.index_exists(self.index_name)
        except StoreError as exc:
            raise SetupError(f"error checking if index exists: {exc}") from exc
        if not exists:
            return
        try:
            self.store.delete_index(self.index_name)
        except StoreError as exc:
            raise SetupError(f"failed to delete existing index: {exc}") from exc
        self.logger.info("deleted existing index: %s", self.index_name)

    def run(self, repos: Iterable[RepoSpec]) -> SessionReport:
        self.prepare()
        report = SessionReport(index=self.index_name)
        for repo in repos:
            report.repositories.append(self.process(repo))
        return report

    def process(self, repo: RepoSpec) -> RepoOutcome:
        """Fetch and index a single repository without letting its errors escape."""
        self.logger.info("processing repo: %s", repo.name)
        try:
            local_path = self.fetcher.ensure_local(repo, self.base_path)
        except CodeSearchError as exc:
            if is_fatal(exc):
                raise
            self.logger.error("repo processing error: %s: %s", repo.name, exc)
            return RepoOutcome(repo=repo, status=RepoStatus.SKIPPED, error=str(exc))

        outcome = RepoOutcome(repo=repo, status=RepoStatus.INDEXED)
        try:
            self.walker.walk(local_path, repo.url, self._index_line, outcome.stats)
        except CodeSearchError as exc:
            if is_fatal(exc):
                raise
            self.logger.error("indexing error: %s: %s", repo.name, exc)
            outcome.status = RepoStatus.FAILED
            outcome.error = str(exc)
        return outcome

    def _index_line(self, line: CodeLine) -> None:
        self.store.index_document(self.index_name, line.to_document())


def create_session(settings: IndexerSettings) -> IndexingSession:
    """Wire a session with the store and fetcher described by *settings*."""
    return IndexingSession(
        create_store(settings),
        RepoFetcher(),
        base_path=settings.workdir,
        index_name=settings.index_name,
    )


__all__ = ["Fetcher", "IndexingSession", "create_session"]
