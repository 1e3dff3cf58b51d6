"""Store protocol for the destination index."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class IndexStore(Protocol):
    """Accepts documents for a named index. Failures raise ``StoreError``."""

    def index_exists(self, name: str) -> bool:
        ...

    def delete_index(self, name: str) -> None:
        ...

    def index_document(self, name: str, document: Mapping[str, Any]) -> None:
        ...

    def close(self) -> None:
        ...
