from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogsphere.core.errors import AppError
from blogsphere.core.logging import get_logger

logger = get_logger("responses")


def send_response(data: Any, message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "message": message, "data": data}),
    )


def send_error(message: str, data: Any = None, status_code: int = status.HTTP_404_NOT_FOUND) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, "data": data if data is not None else []}),
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # loc is ("body" | "query" | "path" | "form", field, ...)
        loc = [str(part) for part in error.get("loc", ())[1:]] or ["request"]
        errors.setdefault(".".join(loc), []).append(error.get("msg", "Invalid value."))
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return send_error(exc.message, exc.data, status_code=exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return send_error("Validation Error.", _field_errors(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = send_error(str(exc.detail), status_code=exc.status_code)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return send_error("Server Error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
