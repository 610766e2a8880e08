"""
Global exception handlers, registered on the FastAPI app in ``create_app``.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from projecthub.config import settings
from projecthub.core.errors import APIError, ErrorCode
from projecthub.core.logger import logger


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or ".".join(str(p) for p in loc)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Validation failed",
            "error": ErrorCode.VALIDATION_FAILED.value,
            "errors": errors,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = ErrorCode.NOT_FOUND if exc.status_code == 404 else ErrorCode.BAD_REQUEST
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "error": code.value},
        headers=getattr(exc, "headers", None),
    )


def _server_error(request: Request, exc: Exception, code: ErrorCode) -> JSONResponse:
    logger.opt(exception=exc).error(
        "Unhandled {} on {} {}: {}", type(exc).__name__, request.method, request.url.path, exc
    )
    content = {
        "success": False,
        "message": "Something went wrong on the server",
        "error": code.value,
    }
    if not settings.is_production:
        content["details"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return _server_error(request, exc, ErrorCode.DATABASE_ERROR)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return _server_error(request, exc, ErrorCode.INTERNAL_ERROR)


def register_exception_handlers(app):
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
