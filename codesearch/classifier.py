"""File eligibility rules for ingestion."""

from __future__ import annotations

import os

# Matched with a plain suffix test against the whole path, so entries are not
# limited to a single extension component: ".terraform" also accepts
# "foo.terraform" and "Dockerfile" also accepts "api.Dockerfile" or any name ending
# in it.
SUPPORTED_SUFFIXES: tuple[str, ...] = (
    ".asm", ".bat", ".bash", ".c", ".cc", ".cfg", ".clj", ".cljc", ".cljs", ".cmd",
    ".conf", ".cpp", ".cjs", ".cxx", ".dart", ".dockerfile", ".editorconfig", ".ejs",
    ".env", ".env.example", ".erb", ".erl", ".ex", ".exs", ".feature", ".go", ".gradle",
    ".groovy", ".h", ".hbs", ".hcl", ".hpp", ".hrl", ".htm", ".html", ".ini", ".java",
    ".js", ".json", ".jsonc", ".jsx", ".ksh", ".kt", ".kts", ".less", ".lisp", ".lsp",
    ".m", ".make", ".markdown", ".md", ".mk", ".mm", ".mjs", ".mustache", ".nomad",
    ".php", ".php5", ".plist", ".properties", ".ps1", ".psql", ".py", ".pyi", ".pyx",
    ".rb", ".rs", ".rst", ".s", ".sass", ".scala", ".scss", ".sh", ".spec.js",
    ".spec.ts", ".sql", ".swift", ".test.go", ".test.js", ".test.ts", ".tf", ".tfvars",
    ".toml", ".ts", ".tsx", ".tsv", ".twig", ".txt", ".xhtml", ".xml", ".yaml",
    ".yml", ".zsh", "Dockerfile", "Makefile", ".gitignore", ".gitattributes", ".terraform",
)


def is_supported(path: str | os.PathLike[str]) -> bool:
    """Return True when *path* ends with a recognised suffix or conventional name."""
    return os.fspath(path).endswith(SUPPORTED_SUFFIXES)


__all__ = ["SUPPORTED_SUFFIXES", "is_supported"]
