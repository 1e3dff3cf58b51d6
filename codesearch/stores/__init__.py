"""Destination index backends."""

from __future__ import annotations

from pathlib import Path

from ..config import IndexerSettings
from ..errors import SetupError
from .base import IndexStore
from .local import LocalIndexStore


def create_store(settings: IndexerSettings) -> IndexStore:
    """Build the store backend selected in *settings*."""
    if settings.store == "local":
        directory = settings.local_dir or Path(settings.workdir) / ".index"
        return LocalIndexStore(directory)

    from .elastic import ElasticsearchStore

    try:
        return ElasticsearchStore(settings.es_url, request_timeout=settings.request_timeout)
    except (TypeError, ValueError) as exc:
        raise SetupError(f"cannot create Elasticsearch client for {settings.es_url}: {exc}") from exc


__all__ = ["IndexStore", "LocalIndexStore", "create_store"]
