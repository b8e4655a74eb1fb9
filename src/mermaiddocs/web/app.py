"""FastAPI application exposing the documentation tools over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Literal

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from mermaiddocs.config import AppConfig
from mermaiddocs.tools import DocsToolkit, ToolResult

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class SearchPayload(BaseModel):
    query: str
    case_sensitive: bool = False
    max_results: int = 50
    context_lines: int = Field(default=3, ge=0)


class SectionSearchPayload(BaseModel):
    query: str
    diagram_type: str | None = None
    mode: Literal["snippet", "full"] = "snippet"
    case_sensitive: bool = False
    max_results: int = 5


class CodePayload(BaseModel):
    code: str


def get_toolkit(request: Request) -> DocsToolkit:
    return request.app.state.toolkit


_STATUS_BY_REASON = {
    "invalid_input": 400,
    "not_found": 404,
    "no_corpus": 503,
}


def _raise_for_error(result: ToolResult) -> None:
    if not result.is_error:
        return
    status_code = _STATUS_BY_REASON.get(result.reason or "", 500)
    raise HTTPException(status_code=status_code, detail=result.payload)


@router.post("/search")
async def search_documents(
    payload: SearchPayload, toolkit: DocsToolkit = Depends(get_toolkit)
) -> Dict[str, Any]:
    if not payload.query.strip():
        raise HTTPException(status_code=400, detail="Empty query")
    result = toolkit.search_lines(
        payload.query,
        case_sensitive=payload.case_sensitive,
        max_results=payload.max_results,
        context_lines=payload.context_lines,
    )
    _raise_for_error(result)
    return result.payload


@router.post("/search/sections")
async def search_sections(
    payload: SectionSearchPayload, toolkit: DocsToolkit = Depends(get_toolkit)
) -> Dict[str, Any]:
    if not payload.query.strip():
        raise HTTPException(status_code=400, detail="Empty query")
    result = toolkit.search_sections(
        payload.query,
        diagram_type=payload.diagram_type,
        mode=payload.mode,
        case_sensitive=payload.case_sensitive,
        max_results=payload.max_results,
    )
    _raise_for_error(result)
    return result.payload


@router.post("/validate")
async def validate_diagram(
    payload: CodePayload, toolkit: DocsToolkit = Depends(get_toolkit)
) -> Dict[str, Any]:
    """Validation failures are ordinary results, returned with status 200."""
    result = await asyncio.to_thread(toolkit.validate, payload.code)
    return result.payload


@router.post("/analyze")
async def analyze_diagram(
    payload: CodePayload, toolkit: DocsToolkit = Depends(get_toolkit)
) -> Dict[str, Any]:
    result = await asyncio.to_thread(toolkit.analyze, payload.code)
    _raise_for_error(result)
    return result.payload


@router.get("/diagram-types")
async def list_diagram_types(toolkit: DocsToolkit = Depends(get_toolkit)) -> Dict[str, Any]:
    return toolkit.list_diagram_types().payload


@router.get("/examples/{diagram_type}")
async def get_examples(
    diagram_type: str, toolkit: DocsToolkit = Depends(get_toolkit)
) -> Dict[str, Any]:
    result = toolkit.get_examples(diagram_type)
    _raise_for_error(result)
    return result.payload


@router.get("/documents")
async def list_documents(toolkit: DocsToolkit = Depends(get_toolkit)) -> Dict[str, Any]:
    """List the loaded documentation files."""
    documents = [
        {"id": document.id, "size": len(document.text)} for document in toolkit.store.all()
    ]
    return {"documents": documents, "total": len(documents)}


@router.get("/documents/{doc_id}")
async def get_document(doc_id: str, toolkit: DocsToolkit = Depends(get_toolkit)) -> Dict[str, Any]:
    document = toolkit.store.get(doc_id)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Document not found: {doc_id}")
    return {"id": document.id, "text": document.text}


def create_app(toolkit: DocsToolkit | None = None) -> FastAPI:
    application = FastAPI(title="Mermaid Docs", version="0.1.0")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.state.toolkit = toolkit or DocsToolkit.from_config(AppConfig(), Path.cwd())
    application.include_router(router)

    @application.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        stats = application.state.toolkit.store.load()
        if not stats.loaded:
            LOGGER.warning("No documentation loaded; searches will fail")

    return application


app = create_app()
