"""Configuration loading for codesearch (repos.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .errors import SetupError
from .models import RepoSpec

CODESEARCH_INDEX = "codesearch"
DEFAULT_CONFIG_PATH = Path("repos.yaml")
DEFAULT_WORKDIR = Path("cloned_repos")
DEFAULT_ES_URL = "http://localhost:9200"

STORE_BACKENDS = ("elasticsearch", "local")


class ConfigError(SetupError):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass
class CodeSearchConfig:
    """Repositories declared in repos.yaml, in file order."""

    path: Path
    repos: List[RepoSpec] = field(default_factory=list)


@dataclass
class IndexerSettings:
    """Run-time settings for one indexing session."""

    config_path: Path = DEFAULT_CONFIG_PATH
    workdir: Path = DEFAULT_WORKDIR
    index_name: str = CODESEARCH_INDEX
    store: str = "elasticsearch"
    es_url: str = DEFAULT_ES_URL
    request_timeout: Optional[float] = None
    local_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        self.config_path = Path(self.config_path)
        self.workdir = Path(self.workdir)
        if self.local_dir is not None:
            self.local_dir = Path(self.local_dir)
        if self.store not in STORE_BACKENDS:
            raise ConfigError(
                f"Unknown store backend '{self.store}' (expected one of {', '.join(STORE_BACKENDS)})"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")


def load_config(config_path: Path) -> CodeSearchConfig:
    """Load the repository list from disk."""
    config_file = Path(config_path).expanduser()
    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    raw_repos = data.get("repos")
    if raw_repos is None:
        raw_repos = []
    if not isinstance(raw_repos, list):
        raise ConfigError(f"{config_file.name}: 'repos' must be a list")

    repos = [_parse_repo(entry, position) for position, entry in enumerate(raw_repos, start=1)]
    return CodeSearchConfig(path=config_file.resolve(), repos=repos)


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _parse_repo(entry: Any, position: int) -> RepoSpec:
    if not isinstance(entry, dict):
        raise ConfigError(f"repos[{position}] must be a mapping with 'name' and 'url'")
    name = _as_str(entry.get("name"))
    url = _as_str(entry.get("url"))
    if not name:
        raise ConfigError(f"repos[{position}] is missing 'name'")
    if not url:
        raise ConfigError(f"repos[{position}] ({name}) is missing 'url'")
    return RepoSpec(name=name, url=url)


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None
