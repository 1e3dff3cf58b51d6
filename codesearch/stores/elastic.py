"""Elasticsearch-backed destination index."""

from __future__ import annotations

from typing import Any, Mapping

from elasticsearch import ApiError, Elasticsearch, TransportError

from ..errors import StoreError


class ElasticsearchStore:
    """Indexes one document per request through the official client."""

    def __init__(
        self,
        url: str,
        *,
        request_timeout: float | None = None,
        client: Elasticsearch | None = None,
    ) -> None:
        self.url = url
        if client is None:
            options: dict[str, Any] = {}
            if request_timeout is not None:
                options["request_timeout"] = request_timeout
            client = Elasticsearch(url, **options)
        self._client = client

    def index_exists(self, name: str) -> bool:
        try:
            return bool(self._client.indices.exists(index=name))
        except (ApiError, TransportError) as exc:
            raise StoreError(f"error checking if index exists: {exc}") from exc

    def delete_index(self, name: str) -> None:
        try:
            self._client.indices.delete(index=name)
        except (ApiError, TransportError) as exc:
            raise StoreError(f"failed to delete index {name}: {exc}") from exc

    def index_document(self, name: str, document: Mapping[str, Any]) -> None:
        try:
            self._client.index(index=name, document=dict(document))
        except (ApiError, TransportError) as exc:
            raise StoreError(str(exc)) from exc

    def close(self) -> None:
        self._client.close()
