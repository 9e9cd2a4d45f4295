"""Error handling for the FastAPI application, repository and database exceptions."""

import asyncpg
import pydantic
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

from dealerhub_api.db.errors import InvalidFieldError
from dealerhub_api.db.errors import InvalidStateError
from dealerhub_api.db.errors import RecordNotFoundError
from dealerhub_api.db.errors import RepositoryError
from dealerhub_api.monitoring.logger import log_response_info

# asyncpg exceptions answered with 500 by handle_database_errors
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError)

# Explicit exports
__all__ = [
    "DATABASE_ERRORS",
    "handle_broad_exceptions",
    "handle_database_errors",
    "handle_pydantic_validation_errors",
    "handle_repository_errors",
]


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = {"message": "Internal server error", "error_type": type(err).__name__}

        # Get request body from request state (set by RequestContextMiddleware)
        request_body = getattr(request.state, "request_body", None)

        logger.error(
            f"Unhandled exception: {type(err).__name__}: {str(err)}",
            http_status=500,
            status_code=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
            error_message=str(err),
            request_body=request_body,
            response_body=error_response,
            exc_info=True,
        )

        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )
        log_response_info(response)
        return response


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    errors = exc.errors()
    error_response = {
        "detail": [
            {
                "msg": error["msg"],
                "input": error["input"],
            }
            for error in errors
        ]
    }

    request_body = getattr(request.state, "request_body", None)

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        http_status=422,
        status_code=422,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type="ValidationError",
        validation_errors=errors,
        request_body=request_body,
        response_body=error_response,
    )

    response = JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response,
    )
    log_response_info(response)

    return response


async def handle_repository_errors(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Convert repository errors into HTTP responses.

    Maps repository exceptions to HTTP status codes:
    - RecordNotFoundError -> 404 Not Found
    - InvalidFieldError -> 422 Unprocessable Content
    - InvalidStateError -> 409 Conflict
    - Other RepositoryError -> 400 Bad Request

    Parameters
    ----------
    request : Request
        FastAPI request object
    exc : RepositoryError
        Repository exception

    Returns
    -------
    JSONResponse
        {"message": ...} with the mapped status code
    """
    if isinstance(exc, RecordNotFoundError):
        http_status = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, InvalidFieldError):
        http_status = status.HTTP_422_UNPROCESSABLE_CONTENT
    elif isinstance(exc, InvalidStateError):
        http_status = status.HTTP_409_CONFLICT
    else:
        http_status = status.HTTP_400_BAD_REQUEST

    error_response = {"message": exc.message, "error_type": type(exc).__name__}

    logger.warning(
        f"Request rejected: {type(exc).__name__}: {exc.message}",
        http_status=http_status,
        status_code=http_status,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=type(exc).__name__,
        request_body=getattr(request.state, "request_body", None),
        response_body=error_response,
    )

    response = JSONResponse(status_code=http_status, content=error_response)
    log_response_info(response)
    return response


async def handle_database_errors(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle asyncpg errors (query failures and connection problems) as 500 responses.

    The database error text is logged but not returned to the caller.
    """
    error_type = type(exc).__name__
    error_response = {"message": "Database error", "error_type": error_type}

    logger.error(
        f"Database error: {error_type}: {exc}",
        http_status=500,
        status_code=500,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=error_type,
        error_message=str(exc),
        request_body=getattr(request.state, "request_body", None),
        response_body=error_response,
        exc_info=True,
    )

    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )
    log_response_info(response)
    return response

