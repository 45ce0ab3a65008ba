import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def format_validation_errors(errors) -> str:
    """Render pydantic/FastAPI errors as ``"query.size: Field required; ..."``."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _failure(message: str, status_code: str, http_status: int) -> JSONResponse:
    wrapped = JsonOutResult(
        data=None,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()
    return JSONResponse(content=wrapped, status_code=http_status)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # error_response() already packs a JsonOutResult into detail
        if isinstance(exc.detail, dict) and {"status", "status_code", "message"}.issubset(exc.detail.keys()):
            return JSONResponse(content=exc.detail, status_code=exc.status_code)
        return _failure(str(exc.detail), str(exc.status_code), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _failure(
            format_validation_errors(exc.errors()),
            AppStatusCode.REQUIRED_VALIDATION_ERROR,
            422
        )

    @app.exception_handler(ValidationError)
    async def model_validation_exception_handler(request: Request, exc: ValidationError):
        return _failure(
            format_validation_errors(exc.errors()),
            AppStatusCode.INVALID_INPUT,
            422
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _failure("Internal server error", AppStatusCode.OPERATION_FAILED, 500)
