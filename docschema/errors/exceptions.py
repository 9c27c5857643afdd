"""Raised Schema Errors

The schema reports recoverable problems through its error report. The few
conditions that must abort the current call are raised as exceptions
wrapping an AppError, so callers still get the typed code and metadata.
"""
from __future__ import annotations

from .types import AppError, ErrorCode
from .builders import schema_error


def _join(prefix: str, path: str | None) -> str:
    return f"{prefix}.{path}" if path else prefix


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when an AppError has to cross a boundary that does not
    use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class CompileError(AppErrorException):
    """A field or dependency is misdeclared; the schema cannot be used.

    ``path`` is the dotted field path the failure belongs to, ``reason``
    the bare cause. The message reads ``path: reason``.
    """

    def __init__(self, reason: str, *, path: str | None = None, cause: Exception | None = None,
                 code: ErrorCode = ErrorCode.E7001_COMPILE_FAILED):
        self.reason, self.path = reason, path
        message = f"{path}: {reason}" if path else reason
        super().__init__(schema_error(message, code=code, path=path, origin="compile", cause=cause))

    def prefixed(self, name: str) -> CompileError:
        """Same error, one level further up the schema tree."""
        return CompileError(self.reason, path=_join(name, self.path), cause=self.error.cause, code=self.code)


class SerializeError(AppErrorException):
    """A field serializer rejected a value; the whole payload is suspect."""

    def __init__(self, path: str, reason: str, *, cause: AppError | None = None):
        self.path, self.reason, self.cause_error = path, reason, cause
        error = schema_error(f"{path}: {reason}", code=ErrorCode.E7002_SERIALIZE_FAILED,
            path=path, origin="serialize")
        if cause is not None:
            error = error.with_metadata(cause_code=cause.code.name)
        super().__init__(error)

    def prefixed(self, name: str) -> SerializeError:
        return SerializeError(_join(name, self.path), self.reason, cause=self.cause_error)


class InvalidUsageError(AppErrorException):
    """The schema API was called in a way its contract forbids."""

    def __init__(self, message: str):
        super().__init__(schema_error(message, code=ErrorCode.E7003_INVALID_USAGE, origin="usage"))
