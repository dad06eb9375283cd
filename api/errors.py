"""
crowdfunding-api/api/errors.py
Gestionnaires d'exceptions : toute erreur sort dans l'enveloppe {success, data, error}
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from application.results import ErrorCode

logger = logging.getLogger(__name__)


def error_envelope(message: str, code: Optional[ErrorCode] = None, details: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "data": None,
        "error": {
            "message": message,
            "code": code.value if code else None,
            "details": details
        }
    }


def format_request_errors(exc: RequestValidationError) -> Dict[str, str]:
    """{"sortBy": "Input should be 'date', 'progress' or 'amount'", ...}"""
    details: Dict[str, str] = {}
    for error in exc.errors():
        # Le premier élément indique la source (query, path, body)
        location = [str(part) for part in error.get("loc", ())[1:]]
        key = ".".join(location) or "request"
        details.setdefault(key, error.get("msg", "Invalid value"))
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'exceptions de l'API"""

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        return JSONResponse(
            status_code=400,
            content=error_envelope("Invalid request", ErrorCode.VALIDATION_ERROR, format_request_errors(exc))
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> Response:
        code = ErrorCode.NOT_FOUND if exc.status_code == 404 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(str(exc.detail), code),
            headers=dict(exc.headers or {})
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.error(f"❌ Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_envelope("Internal server error", ErrorCode.INTERNAL_ERROR)
        )
