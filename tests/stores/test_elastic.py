"""Tests for the Elasticsearch store using a recording client."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from elastic_transport import ApiResponseMeta, ConnectionError as TransportConnectionError
from elastic_transport import HttpHeaders, NodeConfig
from elasticsearch import NotFoundError

from codesearch.config import IndexerSettings
from codesearch.errors import SetupError, StoreError
from codesearch.stores import create_store
from codesearch.stores.elastic import ElasticsearchStore


def _meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


class _Indices:
    def __init__(self, client: "RecordingClient") -> None:
        self._client = client

    def exists(self, *, index: str) -> bool:
        self._client.calls.append(("exists", index))
        return index in self._client.indices_present

    def delete(self, *, index: str) -> None:
        self._client.calls.append(("delete", index))
        if index not in self._client.indices_present:
            raise NotFoundError("index_not_found_exception", _meta(404), {})
        self._client.indices_present.discard(index)


class RecordingClient:
    """Captures calls made through the subset of the client API the store uses."""

    def __init__(self, *, present: set[str] | None = None, fail_on: str | None = None) -> None:
        self.indices_present = set(present or ())
        self.fail_on = fail_on
        self.calls: List[tuple[str, Any]] = []
        self.documents: List[Dict[str, Any]] = []
        self.indices = _Indices(self)
        self.closed = False

    def index(self, *, index: str, document: Dict[str, Any]) -> None:
        if self.fail_on is not None and document.get("content") == self.fail_on:
            raise TransportConnectionError("connection refused")
        self.calls.append(("index", index))
        self.documents.append(document)

    def close(self) -> None:
        self.closed = True


def test_index_exists_and_delete() -> None:
    client = RecordingClient(present={"codesearch"})
    store = ElasticsearchStore("http://localhost:9200", client=client)

    assert store.index_exists("codesearch") is True
    store.delete_index("codesearch")
    assert store.index_exists("codesearch") is False
    assert client.calls == [
        ("exists", "codesearch"),
        ("delete", "codesearch"),
        ("exists", "codesearch"),
    ]


def test_api_error_becomes_store_error() -> None:
    store = ElasticsearchStore("http://localhost:9200", client=RecordingClient())

    with pytest.raises(StoreError):
        store.delete_index("codesearch")


def test_index_document_sends_plain_dict() -> None:
    client = RecordingClient()
    store = ElasticsearchStore("http://localhost:9200", client=client)

    store.index_document("codesearch", {"line": 1, "content": "x"})

    assert client.documents == [{"line": 1, "content": "x"}]
    assert client.calls == [("index", "codesearch")]


def test_transport_error_becomes_store_error() -> None:
    store = ElasticsearchStore("http://localhost:9200", client=RecordingClient(fail_on="boom"))

    with pytest.raises(StoreError):
        store.index_document("codesearch", {"content": "boom"})


def test_close_closes_client() -> None:
    client = RecordingClient()
    ElasticsearchStore("http://localhost:9200", client=client).close()

    assert client.closed


def test_create_store_builds_elasticsearch_client() -> None:
    store = create_store(IndexerSettings(es_url="http://search.internal:9200", request_timeout=5))

    assert isinstance(store, ElasticsearchStore)
    assert store.url == "http://search.internal:9200"


def test_create_store_rejects_bad_url() -> None:
    with pytest.raises(SetupError):
        create_store(IndexerSettings(es_url="not a url"))
