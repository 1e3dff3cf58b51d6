"""Tests for codesearch.session."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Dict, List, Mapping

import pytest

from codesearch.config import IndexerSettings
from codesearch.errors import FetchError, SetupError, StoreError
from codesearch.models import RepoSpec, RepoStatus
from codesearch.session import IndexingSession, create_session
from codesearch.stores import LocalIndexStore
from codesearch.stores.elastic import ElasticsearchStore
from tests.stores.test_elastic import RecordingClient


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class CopyingFetcher:
    """Materialises repositories by copying prepared source trees."""

    def __init__(self, sources: Mapping[str, Path], failing: set[str] | None = None) -> None:
        self.sources = dict(sources)
        self.failing = failing or set()
        self.calls: List[str] = []

    def ensure_local(self, repo: RepoSpec, base_path: Path) -> Path:
        self.calls.append(repo.name)
        if repo.name in self.failing:
            raise FetchError(f"clone of {repo.url} failed")
        target = base_path / repo.name
        if target.exists():
            shutil.rmtree(target)
        shutil.copytree(self.sources[repo.name], target)
        return target


class FlakyStore:
    """In-memory store that rejects configured lines and records calls."""

    def __init__(
        self,
        *,
        exists: bool = False,
        reject_content: str | None = None,
        fail_exists: bool = False,
        fail_delete: bool = False,
    ) -> None:
        self.exists = exists
        self.reject_content = reject_content
        self.fail_exists = fail_exists
        self.fail_delete = fail_delete
        self.deleted: List[str] = []
        self.documents: List[Dict[str, Any]] = []
        self.closed = False

    def index_exists(self, name: str) -> bool:
        if self.fail_exists:
            raise StoreError("cluster unavailable")
        return self.exists

    def delete_index(self, name: str) -> None:
        if self.fail_delete:
            raise StoreError("forbidden")
        self.deleted.append(name)
        self.exists = False

    def index_document(self, name: str, document: Mapping[str, Any]) -> None:
        if document["content"] == self.reject_content:
            raise StoreError("mapper_parsing_exception")
        self.exists = True
        self.documents.append(dict(document))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sources(tmp_path: Path) -> Dict[str, Path]:
    api = tmp_path / "src" / "api"
    _write(api / "server.go", "package api\n\nfunc Serve() {\n}\n")
    _write(api / "README.md", "# API\n")
    _write(api / "logo.png", "binary\n")
    web = tmp_path / "src" / "web"
    _write(web / "app.js", "function start() {\n  return 1;\n}\n")
    return {"api": api, "web": web}


REPOS = [
    RepoSpec(name="api", url="https://example.com/api.git"),
    RepoSpec(name="web", url="https://example.com/web.git"),
]


def test_run_indexes_every_line(tmp_path: Path, sources: Dict[str, Path]) -> None:
    store = LocalIndexStore(tmp_path / "index")
    session = IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    )

    report = session.run(REPOS)

    documents = store.documents("codesearch")
    assert len(documents) == 4 + 1 + 3
    serve = next(doc for doc in documents if doc.get("function") == "Serve")
    assert serve["repository"] == "https://example.com/api.git"
    assert serve["line"] == 3
    assert serve["file_path"].endswith("server.go")
    assert [outcome.status for outcome in report.repositories] == [
        RepoStatus.INDEXED,
        RepoStatus.INDEXED,
    ]
    assert report.indexed_lines == 8
    assert report.summary().startswith("2 indexed, 0 skipped, 0 failed")


def test_existing_index_is_reset(tmp_path: Path, sources: Dict[str, Path]) -> None:
    store = FlakyStore(exists=True)
    session = IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    )

    session.run([])

    assert store.deleted == ["codesearch"]


def test_rerun_produces_identical_index(tmp_path: Path, sources: Dict[str, Path]) -> None:
    store = LocalIndexStore(tmp_path / "index")
    session = IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    )

    session.run(REPOS)
    first = store.documents("codesearch")
    session.run(REPOS)
    second = store.documents("codesearch")

    assert first == second


def test_fetch_failure_does_not_block_later_repos(tmp_path: Path, sources: Dict[str, Path]) -> None:
    store = FlakyStore()
    fetcher = CopyingFetcher(sources, failing={"api"})
    session = IndexingSession(store, fetcher, base_path=tmp_path / "work", index_name="codesearch")

    report = session.run(REPOS)

    assert fetcher.calls == ["api", "web"]
    assert {doc["repository"] for doc in store.documents} == {"https://example.com/web.git"}
    assert report.repositories[0].status is RepoStatus.SKIPPED
    assert "clone" in (report.repositories[0].error or "")
    assert report.repositories[1].status is RepoStatus.INDEXED


def test_line_rejection_is_isolated(tmp_path: Path, sources: Dict[str, Path]) -> None:
    store = FlakyStore(reject_content="package api")
    session = IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    )

    report = session.run(REPOS)

    contents = [doc["content"] for doc in store.documents]
    assert "package api" not in contents
    assert "func Serve() {" in contents
    assert "function start() {" in contents
    assert report.failed_lines == 1
    assert report.repositories[0].status is RepoStatus.INDEXED


def test_open_failure_marks_repository_failed(
    tmp_path: Path, sources: Dict[str, Path], monkeypatch
) -> None:
    store = FlakyStore()
    session = IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    )
    real_open = open

    def fake_open(path, *args, **kwargs):
        if str(path).startswith(str(tmp_path / "work")) and str(path).endswith("server.go"):
            raise PermissionError(13, "Permission denied")
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr("builtins.open", fake_open)

    report = session.run(REPOS)

    assert report.repositories[0].status is RepoStatus.FAILED
    assert "server.go" in (report.repositories[0].error or "")
    assert report.repositories[0].stats.files == 1
    assert report.repositories[1].status is RepoStatus.INDEXED


@pytest.mark.parametrize("flags", [{"fail_exists": True}, {"exists": True, "fail_delete": True}])
def test_reset_failure_is_fatal(tmp_path: Path, sources: Dict[str, Path], flags) -> None:
    fetcher = CopyingFetcher(sources)
    session = IndexingSession(
        FlakyStore(**flags), fetcher, base_path=tmp_path / "work", index_name="codesearch"
    )

    with pytest.raises(SetupError):
        session.run(REPOS)
    assert fetcher.calls == []


def test_uncreatable_workdir_is_fatal(tmp_path: Path, sources: Dict[str, Path]) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    session = IndexingSession(
        FlakyStore(), CopyingFetcher(sources), base_path=blocker / "work", index_name="codesearch"
    )

    with pytest.raises(SetupError):
        session.prepare()


def test_fatal_error_from_fetcher_propagates(tmp_path: Path) -> None:
    class BrokenFetcher:
        def ensure_local(self, repo: RepoSpec, base_path: Path) -> Path:
            raise SetupError("credentials store unavailable")

    session = IndexingSession(
        FlakyStore(), BrokenFetcher(), base_path=tmp_path / "work", index_name="codesearch"
    )

    with pytest.raises(SetupError):
        session.run(REPOS)


def test_create_session_uses_settings(tmp_path: Path) -> None:
    settings = IndexerSettings(
        workdir=tmp_path / "work", store="local", index_name="code", local_dir=tmp_path / "idx"
    )

    session = create_session(settings)

    assert isinstance(session.store, LocalIndexStore)
    assert session.index_name == "code"
    assert session.base_path == tmp_path / "work"


def test_create_session_defaults_to_elasticsearch(tmp_path: Path) -> None:
    session = create_session(IndexerSettings(workdir=tmp_path / "work"))

    assert isinstance(session.store, ElasticsearchStore)


def test_session_closes_elasticsearch_client(tmp_path: Path, sources: Dict[str, Path]) -> None:
    client = RecordingClient(present={"codesearch"})
    store = ElasticsearchStore("http://localhost:9200", client=client)
    with IndexingSession(
        store, CopyingFetcher(sources), base_path=tmp_path / "work", index_name="codesearch"
    ) as session:
        report = session.run(REPOS[:1])

    assert report.repositories[0].status is RepoStatus.INDEXED
    assert ("delete", "codesearch") in client.calls
    assert client.closed


def test_session_closes_store_when_setup_fails(tmp_path: Path) -> None:
    store = FlakyStore(fail_exists=True)

    with pytest.raises(SetupError):
        with IndexingSession(
            store, CopyingFetcher({}), base_path=tmp_path / "work", index_name="codesearch"
        ) as session:
            session.run([])

    assert store.closed
