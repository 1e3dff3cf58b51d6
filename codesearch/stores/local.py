"""File-backed destination index for offline runs."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping

from ..errors import StoreError

_INDEX_NAME = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


class LocalIndexStore:
    """Keeps each index as a JSON Lines file, one document per line."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def path_for(self, name: str) -> Path:
        if not _INDEX_NAME.match(name):
            raise StoreError(f"invalid index name: {name!r}")
        return self._directory / f"{name}.jsonl"

    def index_exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def delete_index(self, name: str) -> None:
        try:
            self.path_for(name).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"failed to delete index {name}: {exc}") from exc

    def index_document(self, name: str, document: Mapping[str, Any]) -> None:
        path = self.path_for(name)
        try:
            payload = json.dumps(dict(document), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"document is not serialisable: {exc}") from exc
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as handle:
                handle.write(payload + "\n")
        except OSError as exc:
            raise StoreError(f"failed to write to {path}: {exc}") from exc

    def close(self) -> None:
        """Nothing to release; documents are flushed on every append."""

    def documents(self, name: str) -> List[Dict[str, Any]]:
        """Return every document stored under *name*, in insertion order."""
        return list(self._iter_documents(self.path_for(name)))

    @staticmethod
    def _iter_documents(path: Path) -> Iterator[Dict[str, Any]]:
        try:
            handle = path.open("r", encoding="utf-8")
        except FileNotFoundError:
            return
        with handle:
            for raw in handle:
                if raw.strip():
                    yield json.loads(raw)
