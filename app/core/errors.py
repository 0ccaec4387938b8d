# core/errors.py
import logging
from typing import TypeVar

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.result import Err, ErrorKind, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(err: Err) -> HTTPException:
    code = STATUS_BY_KIND[err.kind]
    if err.kind is ErrorKind.INTERNAL:
        # never echo internal detail back to the caller
        return HTTPException(status_code=code, detail="Internal server error")
    headers = {"WWW-Authenticate": "Bearer"} if err.kind is ErrorKind.AUTH else None
    return HTTPException(status_code=code, detail=err.error.message, headers=headers)


def unwrap(result: Result[T]) -> T:
    """Return the value of an Ok, or raise the HTTPException matching the Err."""
    if isinstance(result, Err):
        raise to_http_exception(result)
    return result.value


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
