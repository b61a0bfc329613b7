"""FastAPI application entrypoint for nativelibs service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config
from ..errors import ConfigurationError
from ..models import NativeLibsOutputs
from ..orchestrator import CopyNativeLibraries


class BuildRequest(BaseModel):
    path: str
    output_root: Optional[str] = None


class ManifestLine(BaseModel):
    path: str
    sha1: str


class BuildResponse(BaseModel):
    libs_dir: str
    asset_libs_dir: str
    metadata_path: str
    entries: List[ManifestLine]


class HealthResponse(BaseModel):
    status: str


def _run_pipeline(path: str, output_root: Optional[str]) -> NativeLibsOutputs:
    config = load_config(Path(path))
    if output_root:
        config.output_root = Path(output_root).expanduser().resolve()
    return CopyNativeLibraries.from_config(config).run()


def create_app(
    pipeline: Callable[[str, Optional[str]], NativeLibsOutputs] = _run_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing the native library pipeline."""

    app = FastAPI(title="nativelibs Service", version="1.0.0")

    async def get_pipeline() -> Callable[[str, Optional[str]], NativeLibsOutputs]:
        return pipeline

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=BuildResponse)
    async def build(
        payload: BuildRequest,
        run: Callable[[str, Optional[str]], NativeLibsOutputs] = Depends(get_pipeline),
    ) -> BuildResponse:
        loop = asyncio.get_running_loop()
        outputs = await loop.run_in_executor(None, run, payload.path, payload.output_root)
        return BuildResponse(
            libs_dir=str(outputs.libs_dir),
            asset_libs_dir=str(outputs.asset_libs_dir),
            metadata_path=str(outputs.metadata_path),
            entries=[ManifestLine(path=entry.path, sha1=entry.sha1) for entry in outputs.entries],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(_: Any, exc: ConfigurationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
