"""Maps service results and guard rejections to HTTP responses, in one place."""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from signalsafe.core.result import (
    INTERNAL_ERROR_MESSAGE,
    Err,
    ErrorKind,
    GuardRejected,
    Result,
)

logger = logging.getLogger(__name__)

MSG_INVALID_REQUEST = "Requisição inválida."

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: Err) -> JSONResponse:
    headers = None
    if error.kind is ErrorKind.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=STATUS_BY_KIND[error.kind],
        content={"error": error.message},
        headers=headers,
    )


def respond(result: Result[BaseModel], success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Render Ok(model) with success_status, Err(kind, message) with the mapped status."""
    if isinstance(result, Err):
        return error_response(result)
    return JSONResponse(
        status_code=success_status,
        content=result.value.model_dump(mode="json", by_alias=True),
    )


async def guard_rejected_handler(request: Request, exc: GuardRejected) -> JSONResponse:
    return error_response(exc.error)


def invalid_request_message(errors: Sequence[Any]) -> str:
    """Name the first offending field; undecodable JSON has no field to name."""
    if not errors or errors[0].get("type") == "json_invalid":
        return MSG_INVALID_REQUEST
    loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
    if not loc:
        return MSG_INVALID_REQUEST
    return f"{MSG_INVALID_REQUEST} Campo inválido: {loc}."


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or path parameters are reported as validation errors."""
    return error_response(Err(ErrorKind.VALIDATION, invalid_request_message(exc.errors())))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path},
    )
    return error_response(Err(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GuardRejected, guard_rejected_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
