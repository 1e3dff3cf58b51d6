"""Clone-or-update of configured repositories."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable

from ..errors import FetchError
from ..logging import get_logger
from ..models import RepoSpec


class RepoFetcher:
    """Materialises a repository under a base directory, cloning or pulling as needed."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def ensure_local(self, repo: RepoSpec, base_path: Path) -> Path:
        """Return the local tree for *repo*, cloning it on first use.

        An existing checkout is updated in place; a failed pull (including
        one with nothing to fetch) only produces a warning.
        """
        target = Path(base_path) / repo.name
        # Never block on a credential prompt for private or missing remotes.
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        if not target.exists():
            try:
                self._run(
                    ["git", "clone", repo.url, str(target)],
                    cwd=Path.cwd(),
                    env=env,
                    capture_output=True,
                )
            except (OSError, subprocess.CalledProcessError) as exc:
                raise FetchError(f"clone of {repo.url} failed: {_describe(exc)}") from exc
            return target

        try:
            self._run(["git", "rev-parse", "--git-dir"], cwd=target, env=env, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise FetchError(f"{target} is not a git work tree: {_describe(exc)}") from exc

        try:
            output = self._run(
                ["git", "pull", "origin"], cwd=target, env=env, capture_output=True
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.warning("pull warning: %s: %s", repo.name, _describe(exc))
        else:
            if output.strip():
                self.logger.debug("pull %s: %s", repo.name, output.strip().splitlines()[-1])
        return target

    # ------------------------------------------------------------------
    # Helpers

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, env=env, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


def _describe(exc: BaseException) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        stderr = exc.stderr.strip() if isinstance(exc.stderr, str) else ""
        if stderr:
            return stderr.splitlines()[-1]
        return f"exit status {exc.returncode}"
    return str(exc)
