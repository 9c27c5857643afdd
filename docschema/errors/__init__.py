"""Error Handling

- Result (Ok/Err): how value validators and serializers report bad input
- AppError and ErrorCode: what went wrong, with a typed code
- Builder functions: ergonomic construction of value errors
- Raised exceptions for the conditions that abort a schema call

Usage:
    from docschema.errors import Ok, Result, AppError, invalid_type

    def validate(value) -> Result[int, AppError]:
        if not isinstance(value, int):
            return invalid_type("an integer", value)
        return Ok(value)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    collect_results,
)

from .builders import (
    validation_error,
    invalid_type,
    invalid_format,
    out_of_range,
    constraint_violation,
    invalid_date,
    schema_error,
)

from .exceptions import (
    AppErrorException,
    CompileError,
    SerializeError,
    InvalidUsageError,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "collect_results",
    # Builders
    "validation_error",
    "invalid_type",
    "invalid_format",
    "out_of_range",
    "constraint_violation",
    "invalid_date",
    "schema_error",
    # Exceptions
    "AppErrorException",
    "CompileError",
    "SerializeError",
    "InvalidUsageError",
]
