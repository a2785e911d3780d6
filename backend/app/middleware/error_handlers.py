"""Exception handlers that give every error response the `{success, message, errors?}` shape."""

import logging
import re
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.utils.errors import DocumentValidationError

logger = logging.getLogger(__name__)

REQUEST_SECTIONS = ("body", "query", "path", "header", "cookie")


def _wire_name(name: str) -> str:
    # Errors raised while validating a default carry the snake_case field name.
    return re.sub(r"_([a-z0-9])", lambda m: m.group(1).upper(), name)


def format_error_field(loc: Sequence[Any]) -> str:
    """Render a pydantic error location as a wire path, e.g. ``batches[0].slots[1].time``."""
    parts = list(loc)
    section = ""
    if parts and parts[0] in REQUEST_SECTIONS:
        section = str(parts.pop(0))
    field = ""
    for part in parts:
        if isinstance(part, int):
            field += f"[{part}]"
        else:
            name = _wire_name(str(part))
            field += f".{name}" if field else name
    if not field or field.startswith("["):
        field = f"{section or 'body'}{field}"
    return field


def validation_error_items(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    return [
        {"field": format_error_field(error.get("loc", ())), "message": str(error.get("msg", ""))}
        for error in errors
    ]


def _error_body(message: str, errors: List[Dict[str, str]] | None = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = validation_error_items(exc.errors())
    logger.info("Validation failed for %s %s: %d error(s)", request.method, request.url.path, len(errors))
    return JSONResponse(status_code=400, content=_error_body("Validation failed", errors))


async def document_validation_handler(request: Request, exc: DocumentValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=_error_body("Database validation failed", exc.errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DocumentValidationError, document_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
