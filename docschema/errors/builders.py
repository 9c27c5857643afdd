"""Domain-Specific Error Builders

Ergonomic constructors for typed errors. Each builder creates an
AppError with the appropriate code and wraps it in Err.
"""
from typing import Any

from .types import AppError, ErrorCode, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    value: Any = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"value": value, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        origin=origin,
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def invalid_type(expected: str, value: Any, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"not {expected}",
        code=ErrorCode.E2004_INVALID_TYPE,
        expected=expected,
        actual=type(value).__name__,
        origin=origin,
    )


def invalid_format(message: str, value: Any = None, origin: str = "") -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2002_INVALID_FORMAT,
        value=value,
        origin=origin,
    )


def out_of_range(
    message: str,
    value: int | float,
    min_val: int | float | None = None,
    max_val: int | float | None = None,
    origin: str = "",
) -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2003_OUT_OF_RANGE,
        value=value,
        min=min_val,
        max=max_val,
        origin=origin,
    )


def constraint_violation(message: str, value: Any = None, origin: str = "", **metadata) -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2005_CONSTRAINT_VIOLATION,
        value=value,
        origin=origin,
        **metadata,
    )


def invalid_date(message: str, value: Any = None, origin: str = "") -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2012_INVALID_DATE,
        value=value,
        origin=origin,
        format="ISO8601",
    )


# =============================================================================
# Schema Errors (E7xxx)
# =============================================================================

def schema_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E7000_SCHEMA_GENERIC,
    path: str | None = None,
    origin: str = "schema",
    cause: Exception | None = None,
    **metadata,
) -> AppError:
    """Create schema configuration/usage error.

    Unlike the validation builders this returns the bare AppError: schema
    errors are raised, never reported through a Result.
    """
    meta = {"path": path, **metadata}
    return AppError(
        code=code,
        message=message,
        origin=origin,
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    )
