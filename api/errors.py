"""
Module 07 - API Error Handling

Standardized error handling for the API.

Pool exceptions are translated to structured JSON errors. The pool's error
code is passed through unchanged; only the HTTP status is chosen here.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, PoolException


logger = logging.getLogger(__name__)


# HTTP status per pool error code; unlisted codes map to 400
POOL_ERROR_STATUS: dict[str, int] = {
    ErrorCodes.NULLIFIER_ALREADY_SPENT: 409,
    ErrorCodes.COMMITMENT_ALREADY_EXISTS: 409,
    ErrorCodes.INVALID_ROOT: 400,
    ErrorCodes.PROOF_VERIFICATION_FAILED: 400,
    ErrorCodes.MALFORMED_PUBLIC_INPUTS: 400,
    ErrorCodes.SCHEMA_VALIDATION_ERROR: 400,
    ErrorCodes.LEAF_INDEX_OUT_OF_RANGE: 404,
    ErrorCodes.POOL_FULL: 503,
    ErrorCodes.POOL_HALTED: 503,
    ErrorCodes.INVARIANT_VIOLATION: 500,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.retryable = retryable
        super().__init__(message)

    @classmethod
    def from_pool_exception(cls, exc: PoolException) -> "APIError":
        return cls(
            code=exc.code,
            message=exc.message,
            status_code=POOL_ERROR_STATUS.get(exc.code, 400),
            details=exc.details,
            retryable=exc.retryable,
        )

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
                retryable=self.retryable,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class PoolNotConfiguredError(APIError):
    """No pool could be built from the server configuration."""

    def __init__(self, message: str):
        super().__init__(
            code="POOL_NOT_CONFIGURED",
            message=message,
            status_code=503,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def pool_error_handler(request: Request, exc: PoolException) -> JSONResponse:
    """Handle pool exceptions raised out of route handlers."""
    api_error = APIError.from_pool_exception(exc)
    if api_error.status_code >= 500:
        logger.error("Pool error on %s: %s (%s)", request.url.path, exc.message, exc.code)
    return await api_error_handler(request, api_error)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("Unhandled error on %s: %r", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
