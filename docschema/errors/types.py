"""Result Types for Value Checks

Value validators, field serializers and the date parser report bad input
through ``Result`` instead of raising. The schema only ever looks at the
variant and, on failure, copies ``AppError.message`` into its error report;
the code and metadata are there for callers who inspect a Result directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
E = TypeVar("E")


class ErrorCode(Enum):
    """Error codes.

    E2xxx: a value was rejected (reported, never raised)
    E7xxx: the schema itself failed or was misused (raised)
    """
    # Values (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2012_INVALID_DATE = 2012

    # Schema (E7xxx)
    E7000_SCHEMA_GENERIC = 7000
    E7001_COMPILE_FAILED = 7001
    E7002_SERIALIZE_FAILED = 7002
    E7003_INVALID_USAGE = 7003
    E7004_UNKNOWN_DEPENDENCY_FIELD = 7004
    E7005_REQUEST_CANCELLED = 7005

    @property
    def category(self) -> str:
        return "validation" if self.value < 7000 else "schema"


@dataclass(frozen=True, slots=True)
class AppError:
    """A rejected value or a schema failure.

    ``origin`` names the stage that produced it (``compile``, ``serialize``,
    ``usage``...), ``metadata`` holds the offending value and the violated
    bound when there is one.
    """
    code: ErrorCode
    message: str
    origin: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def with_metadata(self, **kwargs) -> AppError:
        return AppError(self.code, self.message, self.origin, {**self.metadata, **kwargs}, self.cause)

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]


def collect_results(results: list[Result[T, AppError]]) -> Result[list[T], list[tuple[int, AppError]]]:
    """All values when every result is Ok, else every failure with its index."""
    values: list[T] = []
    failures: list[tuple[int, AppError]] = []
    for index, result in enumerate(results):
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                failures.append((index, error))
    if failures:
        return Err(failures)
    return Ok(values)
