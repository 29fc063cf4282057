"""FastAPI application entrypoint for compgraph service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..models import Entity
from ..orchestrator import Orchestrator
from ..paths import canonicalize

T = TypeVar("T")


class UsingComponentModel(BaseModel):
    tag: str
    is_built_in: bool
    name: str
    path: str


class EntityResponse(BaseModel):
    path: str
    is_component: bool
    name: str
    using_components: List[UsingComponentModel] = Field(default_factory=list)


class EntityRequest(BaseModel):
    markup_path: str
    declaration: Dict[str, Any] = Field(default_factory=dict)


class RemoveResponse(BaseModel):
    removed: bool


class IgnoreRequest(BaseModel):
    dry_run: bool = False


class IgnoreResponse(BaseModel):
    changed: bool
    patterns: List[str]


class UnresolvedModel(BaseModel):
    tag: str
    reference: str
    declaration_file: str


class ReportResponse(BaseModel):
    pages: List[str]
    reached: List[str]
    unreached: List[str]
    unresolved: List[UnresolvedModel]


class BootstrapResponse(BaseModel):
    pages: int
    components: int


class HealthResponse(BaseModel):
    status: str


def _entity_response(entity: Entity) -> EntityResponse:
    return EntityResponse(
        path=entity.path,
        is_component=entity.is_component,
        name=entity.name,
        using_components=[
            UsingComponentModel(
                tag=edge.tag,
                is_built_in=edge.is_built_in,
                name=edge.name,
                path=edge.declared_path,
            )
            for edge in entity.using_components
        ],
    )


async def _run_blocking(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(orchestrator: Orchestrator) -> FastAPI:
    """Create the FastAPI application around one project's orchestrator."""

    app = FastAPI(title="compgraph", version="1.0.0")
    app.state.orchestrator = orchestrator

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/bootstrap", response_model=BootstrapResponse)
    async def bootstrap() -> BootstrapResponse:
        registry = await _run_blocking(orchestrator.bootstrap)
        return BootstrapResponse(pages=len(registry.pages()), components=len(registry.components()))

    @app.get("/entities/{path:path}", response_model=EntityResponse)
    async def get_entity(path: str) -> EntityResponse:
        entity = orchestrator.registry.get(canonicalize(path))
        if entity is None:
            raise HTTPException(status_code=404, detail=f"Unknown page or component: {path}")
        return _entity_response(entity)

    @app.put("/entities", response_model=EntityResponse)
    async def put_entity(payload: EntityRequest) -> EntityResponse:
        entity = await _run_blocking(
            lambda: orchestrator.add_or_update(payload.markup_path, payload.declaration)
        )
        return _entity_response(entity)

    @app.delete("/entities/{path:path}", response_model=RemoveResponse)
    async def delete_entity(path: str) -> RemoveResponse:
        removed = await _run_blocking(lambda: orchestrator.remove(path))
        return RemoveResponse(removed=removed is not None)

    @app.post("/ignores", response_model=IgnoreResponse)
    async def check_ignores(payload: Optional[IgnoreRequest] = None) -> IgnoreResponse:
        dry_run = payload.dry_run if payload is not None else False
        update = await _run_blocking(lambda: orchestrator.check_update_pack_ignore(dry_run=dry_run))
        return IgnoreResponse(changed=update.changed, patterns=update.patterns)

    @app.get("/report", response_model=ReportResponse)
    async def report() -> ReportResponse:
        result = await _run_blocking(orchestrator.report)
        return ReportResponse(
            pages=result.pages,
            reached=result.reached,
            unreached=result.unreached,
            unresolved=[
                UnresolvedModel(
                    tag=item.tag,
                    reference=item.reference,
                    declaration_file=item.declaration_file,
                )
                for item in result.unresolved
            ],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app


def run_service(
    orchestrator: Orchestrator, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(orchestrator)
    uvicorn.run(app, host=host, port=port)
