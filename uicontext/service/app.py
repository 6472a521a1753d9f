"""FastAPI application serving the context artifact and preview mocks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI, HTTPException
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    HTTPException = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..stores import ContextNotFoundError, read_context
from ..synth import MockValueSynthesizer, mock_hook_value, to_jsonable


class HealthResponse(BaseModel):
    status: str


class MockResponse(BaseModel):
    id: str
    props: Dict[str, Any]
    hooks: Dict[str, Any]


def create_app(
    context_path: Path = Path("context.json"),
    synthesizer_factory: Callable[[], MockValueSynthesizer] = MockValueSynthesizer,
) -> FastAPI:
    """Create the FastAPI application exposing a built context artifact."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    app = FastAPI(title="uicontext", version="0.1.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/context.json")
    async def context() -> Dict[str, Any]:
        # Re-read per request so a rebuild is picked up without a restart.
        return read_context(context_path)

    @app.get("/components/{component_id}/mock", response_model=MockResponse)
    async def mock_component(component_id: str) -> MockResponse:
        component = read_context(context_path)["components"].get(component_id)
        if not isinstance(component, dict):
            raise HTTPException(status_code=404, detail=f"Unknown component: {component_id}")
        props: List[Dict[str, Any]] = component.get("props", [])
        synthesizer = synthesizer_factory()
        hooks = {
            hook["name"]: to_jsonable(mock_hook_value(hook["name"]))
            for hook in component.get("hooks", [])
            if isinstance(hook, dict) and "name" in hook
        }
        return MockResponse(
            id=component_id,
            props=to_jsonable(synthesizer.generate_all(props)),
            hooks=hooks,
        )

    @app.exception_handler(ContextNotFoundError)
    async def context_not_found_handler(
        _: Any, exc: ContextNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(ValueError)
    async def malformed_context_handler(_: Any, exc: ValueError) -> JSONResponse:
        # The artifact exists but is not one uicontext wrote.
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return app


def run_service(
    context_path: Path = Path("context.json"), host: str = "127.0.0.1", port: int = 3001
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    uvicorn.run(create_app(context_path), host=host, port=port)
