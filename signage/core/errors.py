import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from psycopg import OperationalError

logger = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


def configuration_error(missing: list[str]) -> AppError:
    return AppError(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="CONFIGURATION_ERROR",
        message="System configuration error.",
        details={"missing": missing},
    )


def unauthenticated_error() -> AppError:
    return AppError(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code="UNAUTHENTICATED",
        message="Sign in to continue.",
    )


def forbidden_error(required_role: str) -> AppError:
    return AppError(
        status_code=status.HTTP_403_FORBIDDEN,
        code="FORBIDDEN",
        message="You are not allowed to perform this action.",
        details={"required_role": required_role},
    )


def not_found_error(resource: str, resource_id: Any) -> AppError:
    return AppError(
        status_code=status.HTTP_404_NOT_FOUND,
        code=f"{resource.upper()}_NOT_FOUND",
        message=f"{resource.replace('_', ' ').capitalize()} not found.",
        details={f"{resource}_id": str(resource_id)},
    )


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        code="VALIDATION_ERROR",
        message="Request validation failed.",
        details={"issues": exc.errors()},
    )


async def backend_error_handler(_: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Backend operation failed: %s", exc)
    return error_response(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        code="BACKEND_UNAVAILABLE",
        message="The backend could not complete the operation.",
    )


async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_SERVER_ERROR",
        message="Unexpected server error.",
        details={"reason": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(OperationalError, backend_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
