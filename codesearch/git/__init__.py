"""Git helpers for materialising repositories locally."""

from .fetcher import RepoFetcher

__all__ = ["RepoFetcher"]
