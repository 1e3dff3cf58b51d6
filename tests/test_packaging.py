"""Checks on the project metadata in pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_project_metadata_does_not_ship_design_notes() -> None:
    project = tomllib.loads(_PYPROJECT.read_text(encoding="utf-8"))["project"]

    readme = project.get("readme")
    if readme is not None:
        assert (_PYPROJECT.parent / readme).is_file()
        assert readme not in {"SPEC_FULL.md", "DESIGN.md", "spec.md"}
    assert project["scripts"]["codesearch"] == "codesearch.cli:main"
