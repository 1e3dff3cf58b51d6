"""FastAPI application entrypoint for codesearch service mode."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..config import CODESEARCH_INDEX, DEFAULT_CONFIG_PATH, DEFAULT_ES_URL, DEFAULT_WORKDIR
from ..config import IndexerSettings, load_config
from ..errors import SetupError
from ..functions import match_dialect
from ..models import SessionReport
from ..session import IndexingSession, create_session


class IndexRequest(BaseModel):
    config_path: str = str(DEFAULT_CONFIG_PATH)
    workdir: str = str(DEFAULT_WORKDIR)
    index_name: str = CODESEARCH_INDEX
    store: str = "elasticsearch"
    es_url: str = DEFAULT_ES_URL
    request_timeout: Optional[float] = None
    local_dir: Optional[str] = None


class RepoResult(BaseModel):
    name: str
    url: str
    status: str
    files: int
    lines: int
    failed_lines: int
    error: Optional[str] = None


class IndexResponse(BaseModel):
    index: str
    summary: str
    repositories: list[RepoResult]


class ExtractRequest(BaseModel):
    line: str


class ExtractResponse(BaseModel):
    function: str
    dialect: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _to_response(report: SessionReport) -> IndexResponse:
    return IndexResponse(
        index=report.index,
        summary=report.summary(),
        repositories=[
            RepoResult(
                name=outcome.repo.name,
                url=outcome.repo.url,
                status=outcome.status.value,
                files=outcome.stats.files,
                lines=outcome.stats.lines,
                failed_lines=outcome.stats.failed_lines,
                error=outcome.error,
            )
            for outcome in report.repositories
        ],
    )


def create_app(
    session_factory: Callable[[IndexerSettings], IndexingSession] = create_session,
) -> FastAPI:
    """Create the FastAPI application exposing codesearch operations."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install codesearch[service]`."
        )

    app = FastAPI(title="Code Search Indexer", version="1.0.0")
    # The destination index has a single writer; overlapping runs queue up.
    run_lock = threading.Lock()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(payload: ExtractRequest) -> ExtractResponse:
        matched = match_dialect(payload.line)
        if matched is None:
            return ExtractResponse(function="")
        dialect, name = matched
        return ExtractResponse(function=name, dialect=dialect)

    @app.post("/index", response_model=IndexResponse)
    async def index(payload: IndexRequest) -> IndexResponse:
        def _run_index() -> SessionReport:
            settings = IndexerSettings(
                config_path=payload.config_path,
                workdir=payload.workdir,
                index_name=payload.index_name,
                store=payload.store,
                es_url=payload.es_url,
                request_timeout=payload.request_timeout,
                local_dir=payload.local_dir,
            )
            config = load_config(settings.config_path)
            with run_lock:
                with session_factory(settings) as session:
                    return session.run(config.repos)

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run_index)
        return _to_response(report)

    @app.exception_handler(SetupError)
    async def setup_error_handler(
        _: Any, exc: SetupError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install codesearch[service]`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
