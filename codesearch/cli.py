"""CLI entrypoints for codesearch commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import (
    CODESEARCH_INDEX,
    DEFAULT_CONFIG_PATH,
    DEFAULT_ES_URL,
    DEFAULT_WORKDIR,
    STORE_BACKENDS,
    IndexerSettings,
    load_config,
)
from .errors import SetupError
from .logging import configure_logging
from .session import create_session


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only report warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codesearch",
        description="Index source repositories line by line for code search.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser(
        "index",
        help="Rebuild the code search index from the configured repositories.",
    )
    _add_verbose_option(index_parser, suppress_default=True)
    _add_quiet_option(index_parser, suppress_default=True)
    index_parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Repository list (defaults to repos.yaml).",
    )
    index_parser.add_argument(
        "--workdir",
        type=Path,
        default=DEFAULT_WORKDIR,
        help="Directory repositories are cloned into (defaults to cloned_repos).",
    )
    index_parser.add_argument(
        "--index",
        dest="index_name",
        default=CODESEARCH_INDEX,
        help="Destination index name.",
    )
    index_parser.add_argument(
        "--store",
        choices=STORE_BACKENDS,
        default="elasticsearch",
        help="Destination store backend.",
    )
    index_parser.add_argument(
        "--es-url",
        default=DEFAULT_ES_URL,
        help="Elasticsearch URL for the elasticsearch backend.",
    )
    index_parser.add_argument(
        "--request-timeout",
        type=float,
        default=None,
        help="Seconds to wait for each store request before failing it.",
    )
    index_parser.add_argument(
        "--local-dir",
        type=Path,
        default=None,
        help="Directory holding index files for the local backend.",
    )
    index_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write the log to this file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_quiet_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codesearch commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "index":
        try:
            settings = IndexerSettings(
                config_path=args.config,
                workdir=args.workdir,
                index_name=args.index_name,
                store=args.store,
                es_url=args.es_url,
                request_timeout=args.request_timeout,
                local_dir=args.local_dir,
            )
            config = load_config(settings.config_path)
            with create_session(settings) as session:
                report = session.run(config.repos)
        except SetupError as exc:
            parser.exit(1, f"codesearch index failed: {exc}\n")
        print(report.summary())
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
