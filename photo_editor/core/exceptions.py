# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable failure codes returned in error bodies"""

    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    INVALID_MODEL = "INVALID_MODEL"
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ErrorCode.VALIDATION_ERROR,
}


class CustomHTTPException(HTTPException):
    """Custom HTTP exception"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[ErrorCode] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.extra = extra or {}


class NotFoundException(CustomHTTPException):
    """Resource not found exception"""

    def __init__(self, detail: str, error_code: ErrorCode = ErrorCode.NOT_FOUND):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code,
        )


class ValidationException(CustomHTTPException):
    """Validation exception"""

    def __init__(
        self, detail: str, error_code: ErrorCode = ErrorCode.VALIDATION_ERROR
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class InsufficientCreditsException(CustomHTTPException):
    """Balance is lower than the cost of the requested model"""

    def __init__(self, required: int, available: int):
        super().__init__(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=(
                f"Insufficient credits: {required} required, "
                f"{available} available"
            ),
            error_code=ErrorCode.INSUFFICIENT_CREDITS,
            extra={"required": required, "available": available},
        )


class ProviderException(CustomHTTPException):
    """The AI provider rejected the generation job"""

    def __init__(self, detail: str, task_id: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code=ErrorCode.PROVIDER_ERROR,
            extra={"taskId": task_id},
        )


class InternalServerException(CustomHTTPException):
    """Failure whose details are only written to the log"""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=ErrorCode.INTERNAL_ERROR,
        )


def _error_body(
    detail: Any, error_code: Any, extra: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    if isinstance(error_code, Enum):
        error_code = error_code.value
    body = {"success": False, "error": detail, "errorCode": error_code}
    if extra:
        body.update(extra)
    return body


async def http_exception_handler(request, exc: HTTPException):
    """HTTP exception handler"""
    error_code = getattr(exc, "error_code", None) or _STATUS_ERROR_CODES.get(
        exc.status_code, exc.status_code
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, error_code, getattr(exc, "extra", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request, exc: RequestValidationError):
    """Request validation exception handler"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "Request parameter validation failed",
            ErrorCode.VALIDATION_ERROR,
            {"errors": [_safe_error(e) for e in exc.errors()]},
        ),
    )


async def python_exception_handler(request, exc: Exception):
    """Python exception handler"""
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", ErrorCode.INTERNAL_ERROR),
    )


def _safe_error(error: Dict[str, Any]) -> Dict[str, Any]:
    """Drop the non-serializable ctx entry pydantic attaches to some errors"""
    return {key: value for key, value in error.items() if key != "ctx"}
