"""
Exception handlers rendering every error as ``{"error", "code", "details"}``.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def _error_body(message: str, code: str, details: Optional[Any] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message, "code": code}
    if details:
        body["details"] = jsonable_encoder(details)
    return body


def _parse_detail(detail: Any, status_code: int) -> tuple[str, str, Optional[Any]]:
    fallback_code = f"HTTP_{status_code}"
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else fallback_code
        message = detail.get("message") or detail.get("error") or detail.get("detail")
        return str(message or "Error"), code, detail.get("details")
    if detail is None:
        return "Error", fallback_code, None
    return str(detail), fallback_code, None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message, code, details = _parse_detail(exc.detail, exc.status_code)
        return JSONResponse(
            _error_body(message, code, details),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        message, code, details = _parse_detail(http_exc.detail, http_exc.status_code)
        return JSONResponse(
            _error_body(message, code, details),
            status_code=http_exc.status_code,
            headers=http_exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            _error_body("Request validation failed", "VALIDATION_ERROR", exc.errors()),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            _error_body("Internal Server Error", "INTERNAL_SERVER_ERROR"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
