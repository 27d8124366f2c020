"""FastAPI application exposing the XSD structural model.

Every endpoint is stateless: the caller posts schema text (or a set of files)
and receives the parsed tree, a node lookup, search results, dependencies or
group roles. Persistence, comments and authentication live in the
surrounding system and are not part of this service.

Quick start (run the server)::

    uvicorn xsd_review_api.run_server:app --reload

Core endpoints (REST):

    GET  /health               Basic health probe
    POST /parse                Parse schema text into a node tree
    POST /node                 Look up one node by path (plus breadcrumb)
    POST /search               Search names, kinds and documentation
    POST /dependencies         xs:import / xs:include declarations
    POST /groups/classify      Roles and links for a set of files

Example: parse a schema, two levels deep::

    curl -X POST http://localhost:8000/parse \
         -H "Content-Type: application/json" \
         -d '{"content": "<xs:schema xmlns:xs=\\"http://www.w3.org/2001/XMLSchema\\"/>", "depth": 2}'

Example: classify an upload::

    curl -X POST http://localhost:8000/groups/classify \
         -H "Content-Type: application/json" \
         -d '{"files": [{"filename": "main.xsd", "content": "..."},
                        {"filename": "types.xsd", "content": "..."}]}'

Configuration:
    ``XSD_REVIEW_PARSER_CONFIG`` holds comma separated ``key=value`` pairs
    for :class:`~xsd_review_api.xsd_parser.ParserConfig`, e.g.
    ``resolve_references=false,search_limit=20``.

Error handling:
    * Text that cannot be parsed is a normal outcome (``parsed: false``).
    * 404 and 500 are wrapped with JSON payloads for more consistent client UX.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .dependency_parser import parse_xsd_dependencies
from .models import SchemaFile
from .references import unresolved_references
from .roles import build_schema_group
from .xsd_parser import ParserConfig, node_kind_label, parse_schema, search_nodes

logger = logging.getLogger(__name__)


def _get_parser_config() -> ParserConfig:
    """Get parser configuration from environment variables."""
    config_str = os.getenv("XSD_REVIEW_PARSER_CONFIG", "")
    config = ParserConfig()

    if config_str:
        for pair in config_str.split(","):
            if "=" in pair:
                key, value = pair.split("=", 1)
                key = key.strip()
                value = value.strip()
                if key == "schema_prefixes":
                    prefixes = tuple(p.strip() for p in value.split("|") if p.strip())
                    if prefixes:
                        config.schema_prefixes = prefixes
                elif key == "search_limit":
                    try:
                        limit = int(value)
                    except ValueError:
                        limit = 0
                    if limit >= 1:
                        config.search_limit = limit
                    else:
                        logger.warning(f"Ignoring invalid search_limit: {value!r}")
                elif key == "resolve_references":
                    config.resolve_references = value.lower() == "true"

    return config


PARSER_CONFIG = _get_parser_config()

app = FastAPI(
    title="XSD Review API",
    version=__version__,
    description="Structural model of XSD documents: node trees, references, dependencies and group roles",
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.middleware("http")
async def time_requests(request: Request, call_next):
    """Add response time and API version headers."""
    start_time = time.time()
    response = await call_next(request)
    response_time = time.time() - start_time
    response.headers["X-Response-Time"] = f"{response_time:.3f}s"
    response.headers["X-API-Version"] = __version__
    return response


class SchemaTextRequest(BaseModel):
    """Request carrying one schema document."""

    content: str = Field(..., description="Raw XSD text")


class ParseRequest(SchemaTextRequest):
    depth: Optional[int] = Field(
        None, ge=0, le=50, description="Maximum depth of returned children"
    )


class NodeRequest(SchemaTextRequest):
    path: str = Field(..., description="Node path, e.g. /complexType[@name='Bar']")


class SearchRequest(SchemaTextRequest):
    query: str = Field(..., min_length=1, description="Case-insensitive substring")
    kind: Optional[str] = Field(None, description="Filter by node kind (element, complexType, ...)")
    limit: Optional[int] = Field(None, ge=1, le=500, description="Maximum number of results")


class FileUploadModel(BaseModel):
    filename: str = Field(..., min_length=1)
    content: str
    is_master: bool = Field(False, description="Uploader's explicit master flag")


class ClassifyRequest(BaseModel):
    files: List[FileUploadModel] = Field(..., min_length=1, description="Files of the group")


def get_parser_config() -> ParserConfig:
    return PARSER_CONFIG


def _limit_depth(node_dict: dict, max_depth: int, current_depth: int = 0) -> None:
    """Limit the depth of a node dictionary."""
    if current_depth >= max_depth:
        node_dict["children"] = []
    else:
        for child in node_dict.get("children", []):
            _limit_depth(child, max_depth, current_depth + 1)


def _summary(node) -> Dict[str, Any]:
    return {
        "id": node.id,
        "name": node.name,
        "kind": node.kind,
        "label": node_kind_label(node.kind),
        "path": node.path,
        "documentation": node.documentation,
    }


@app.get("/health")
def health() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "api_version": __version__}


@app.post("/parse")
def parse(
    request: ParseRequest,
    config: ParserConfig = Depends(get_parser_config),
) -> Dict[str, Any]:
    """Parse schema text into a node tree.

    Unparsable text (malformed XML, no ``xs:schema`` root) is reported with
    ``parsed: false`` and a null node rather than an error status.
    """
    tree = parse_schema(request.content, config)
    if tree is None or tree.root is None:
        return {"parsed": False, "node": None, "node_count": 0, "unresolved_references": []}

    node_dict = tree.root.to_dict()
    if request.depth is not None:
        _limit_depth(node_dict, request.depth)
    return {
        "parsed": True,
        "node": node_dict,
        "node_count": len(tree),
        "unresolved_references": [
            {"path": node.path, "reference_name": node.reference_name}
            for node in unresolved_references(tree.root)
        ],
    }


@app.post("/node")
def node(
    request: NodeRequest,
    config: ParserConfig = Depends(get_parser_config),
) -> Dict[str, Any]:
    """Return one node by path together with its ancestor chain."""
    tree = parse_schema(request.content, config)
    if tree is None:
        raise HTTPException(status_code=404, detail="Schema could not be parsed")
    target = tree.find(request.path)
    if target is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {request.path}")
    return {
        "node": target.to_dict(),
        "ancestors": [_summary(n) for n in tree.ancestors(target)],
    }


@app.post("/search")
def search(
    request: SearchRequest,
    config: ParserConfig = Depends(get_parser_config),
) -> Dict[str, Any]:
    """Search node names, kinds and documentation (case-insensitive)."""
    tree = parse_schema(request.content, config)
    if tree is None or tree.root is None:
        return {"results": [], "total": 0, "limited": False}
    limit = request.limit or config.search_limit
    matches = search_nodes(tree.root, request.query, kind=request.kind, limit=limit)
    return {
        "results": [_summary(n) for n in matches],
        "total": len(matches),
        "limited": len(matches) == limit,
    }


@app.post("/dependencies")
def dependencies(request: SchemaTextRequest) -> Dict[str, Any]:
    """List ``xs:import`` / ``xs:include`` declarations of one document."""
    deps = parse_xsd_dependencies(request.content)
    return {"dependencies": [dep.to_dict() for dep in deps]}


@app.post("/groups/classify")
def classify(request: ClassifyRequest) -> Dict[str, Any]:
    """Assign a role to each file of a group and list the internal links."""
    files = [
        SchemaFile(filename=f.filename, content=f.content, is_master=f.is_master)
        for f in request.files
    ]
    group = build_schema_group(files)
    payload = group.to_dict()
    payload["roles"] = {name: role.value for name, role in group.roles.items()}
    return payload


@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Custom 404 handler with more helpful error messages."""
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "detail": (
                str(exc.detail)
                if hasattr(exc, "detail")
                else "The requested resource was not found"
            ),
            "path": str(request.url.path),
        },
    )


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Custom 500 handler for internal errors."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred processing your request",
        },
    )
