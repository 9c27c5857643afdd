"""Built-in Field Validators

Frozen dataclass validators returning Result. Each one checks the type
and constraints of a value and returns it normalized. Validators holding
a regular expression implement Compilable so the pattern is built once.

Usage:
    Field(validator=String(max_len=64) & String(regexp=r"^[a-z]"))
    Field(validator=Array(values=Integer(minimum=0), max_len=10))
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from ipaddress import ip_address, IPv4Address, IPv6Address
from typing import Any, Callable
from urllib.parse import urlparse

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from docschema.errors import (
    AppError,
    Err,
    Ok,
    Result,
    collect_results,
    constraint_violation,
    invalid_date,
    invalid_format,
    invalid_type,
    out_of_range,
    validation_error,
)
from docschema.logging import validation_logger
from docschema.schema.field import Compilable, FieldSerializer, FieldValidator

log = validation_logger()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_time(value: str, default_timezone: tzinfo | None = None) -> datetime:
    """Parse an ISO8601 string, accepting a ``Z`` suffix. Raises ValueError."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None and default_timezone is not None:
        dt = dt.replace(tzinfo=default_timezone)
    return dt


def _compile_all(validators) -> None:
    for v in validators:
        if isinstance(v, Compilable):
            v.compile()


# ============================================================================
# Scalar Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class String(FieldValidator, Compilable):
    """Validate a string against length, pattern and allowed values."""
    min_len: int | None = None
    max_len: int | None = None
    regexp: str | None = None
    allowed: tuple[str, ...] | None = None
    _pattern: re.Pattern | None = field(default=None, init=False, repr=False, compare=False)

    def compile(self) -> None:
        if self.regexp is not None:
            try:
                object.__setattr__(self, "_pattern", re.compile(self.regexp))
            except re.error as e:
                raise ValueError(f"invalid regexp '{self.regexp}': {e}") from e

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, str):
            return invalid_type("a string", value)
        if self.allowed is not None and value not in self.allowed:
            return constraint_violation(f"not one of [{', '.join(self.allowed)}]", value)
        if self.regexp is not None:
            pattern = self._pattern or re.compile(self.regexp)
            if not pattern.search(value):
                return invalid_format(f"does not match {self.regexp}", value)
        if self.min_len is not None and len(value) < self.min_len:
            return out_of_range(f"is shorter than {self.min_len}", len(value), min_val=self.min_len)
        if self.max_len is not None and len(value) > self.max_len:
            return out_of_range(f"is longer than {self.max_len}", len(value), max_val=self.max_len)
        return Ok(value)


@dataclass(frozen=True, slots=True)
class Integer(FieldValidator):
    """Validate an integer. Floats holding a whole number are accepted."""
    minimum: int | None = None
    maximum: int | None = None
    allowed: tuple[int, ...] | None = None

    def validate(self, value: Any) -> Result[Any, AppError]:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or isinstance(value, bool):
            return invalid_type("an integer", value)
        if self.allowed is not None and value not in self.allowed:
            return constraint_violation(f"not one of {list(self.allowed)}", value)
        if self.minimum is not None and value < self.minimum:
            return out_of_range(f"is lower than {self.minimum}", value, min_val=self.minimum)
        if self.maximum is not None and value > self.maximum:
            return out_of_range(f"is greater than {self.maximum}", value, max_val=self.maximum)
        return Ok(value)


@dataclass(frozen=True, slots=True)
class Float(FieldValidator):
    """Validate a number; the normalized value is always a float."""
    minimum: float | None = None
    maximum: float | None = None

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not _is_number(value):
            return invalid_type("a float", value)
        value = float(value)
        if self.minimum is not None and value < self.minimum:
            return out_of_range(f"is lower than {self.minimum}", value, min_val=self.minimum)
        if self.maximum is not None and value > self.maximum:
            return out_of_range(f"is greater than {self.maximum}", value, max_val=self.maximum)
        return Ok(value)


@dataclass(frozen=True, slots=True)
class Bool(FieldValidator):
    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, bool):
            return invalid_type("a Boolean", value)
        return Ok(value)


@dataclass(frozen=True, slots=True)
class Null(FieldValidator):
    def validate(self, value: Any) -> Result[Any, AppError]:
        if value is not None:
            return invalid_type("null", value)
        return Ok(None)


# ============================================================================
# Format Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Time(FieldValidator, FieldSerializer):
    """Validate a point in time.

    Accepts a datetime or an ISO8601 string and normalizes to datetime.
    Serializes back to an ISO8601 string.
    """
    default_timezone: tzinfo | None = None  # applied to naive strings

    def validate(self, value: Any) -> Result[Any, AppError]:
        if isinstance(value, datetime):
            return Ok(value)
        if not isinstance(value, str):
            return invalid_type("a time", value)
        try:
            return Ok(parse_time(value, self.default_timezone))
        except ValueError:
            return invalid_date("not a time", value)

    def serialize(self, value: Any) -> Result[Any, AppError]:
        if isinstance(value, datetime):
            return Ok(value.isoformat())
        if isinstance(value, str) or value is None:
            return Ok(value)
        return invalid_type("a time", value)


@dataclass(frozen=True, slots=True)
class URL(FieldValidator):
    """Validate an absolute URL with an allowed scheme."""
    schemes: tuple[str, ...] = ("http", "https")

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, str):
            return invalid_type("a string", value)
        try:
            parsed = urlparse(value)
        except ValueError:
            return invalid_format("invalid URL", value)
        if parsed.scheme not in self.schemes:
            return invalid_format(f"invalid scheme '{parsed.scheme}'", value)
        if not parsed.netloc:
            return invalid_format("invalid URL: missing host", value)
        return Ok(value)


@dataclass(frozen=True, slots=True)
class IP(FieldValidator):
    """Validate an IP address. The normalized value is its compressed form."""
    version: int | None = None  # 4 or 6, None for both

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, str):
            return invalid_type("a string", value)
        try:
            address = ip_address(value)
        except ValueError:
            return invalid_format("invalid IP address", value)
        if self.version == 4 and not isinstance(address, IPv4Address):
            return invalid_format("not an IPv4 address", value)
        if self.version == 6 and not isinstance(address, IPv6Address):
            return invalid_format("not an IPv6 address", value)
        return Ok(address.compressed)


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Array(FieldValidator, Compilable):
    """Validate a list, and each item with ``values`` when given."""
    values: FieldValidator | None = None
    min_len: int | None = None
    max_len: int | None = None

    def compile(self) -> None:
        _compile_all([self.values])

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, (list, tuple)):
            return invalid_type("an array", value)
        if self.min_len is not None and len(value) < self.min_len:
            return out_of_range(f"has fewer items than {self.min_len}", len(value), min_val=self.min_len)
        if self.max_len is not None and len(value) > self.max_len:
            return out_of_range(f"has more items than {self.max_len}", len(value), max_val=self.max_len)
        if self.values is None:
            return Ok(list(value))
        match collect_results([self.values.validate(item) for item in value]):
            case Ok(items):
                return Ok(items)
            case Err([(index, error), *rest]):
                return validation_error(f"invalid value at #{index + 1}: {error.message}",
                    index=index + 1, failed=len(rest) + 1)


@dataclass(frozen=True, slots=True)
class Dict(FieldValidator, Compilable):
    """Validate a free-form mapping with optional key and value validators."""
    keys: FieldValidator | None = None
    values: FieldValidator | None = None

    def compile(self) -> None:
        _compile_all([self.keys, self.values])

    def validate(self, value: Any) -> Result[Any, AppError]:
        if not isinstance(value, Mapping):
            return invalid_type("a dict", value)
        normalized = {}
        for key, item in value.items():
            if self.keys is not None:
                match self.keys.validate(key):
                    case Ok(k):
                        key = k
                    case Err(error):
                        return validation_error(f"invalid key `{key}': {error.message}", key=str(key))
            if self.values is not None:
                match self.values.validate(item):
                    case Ok(v):
                        item = v
                    case Err(error):
                        return validation_error(f"invalid value for key `{key}': {error.message}", key=str(key))
            normalized[key] = item
        return Ok(normalized)


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class AllOf(FieldValidator, Compilable):
    """All validators must pass; each receives the previous one's output."""
    validators: tuple[FieldValidator, ...]

    def __init__(self, *validators: FieldValidator):
        object.__setattr__(self, "validators", tuple(validators))

    def compile(self) -> None:
        _compile_all(self.validators)

    def validate(self, value: Any) -> Result[Any, AppError]:
        for v in self.validators:
            match v.validate(value):
                case Ok(normalized):
                    value = normalized
                case Err(_) as failure:
                    return failure
        return Ok(value)


@dataclass(frozen=True, slots=True)
class AnyOf(FieldValidator, Compilable):
    """At least one validator must pass; the first success wins."""
    validators: tuple[FieldValidator, ...]

    def __init__(self, *validators: FieldValidator):
        object.__setattr__(self, "validators", tuple(validators))

    def compile(self) -> None:
        _compile_all(self.validators)

    def validate(self, value: Any) -> Result[Any, AppError]:
        messages = []
        for v in self.validators:
            match v.validate(value):
                case Ok(_) as success:
                    return success
                case Err(error):
                    messages.append(error.message)
        return validation_error(f"no constraint satisfied: {'; '.join(messages)}")


# ============================================================================
# Adapters
# ============================================================================

@dataclass(frozen=True, slots=True)
class TypeAdapterValidator(FieldValidator):
    """Validate with any type pydantic understands.

    The adapter is built on construction, so an annotation pydantic cannot
    handle fails where the schema is declared.

    Usage:
        Field(validator=TypeAdapterValidator(list[conint(ge=0)]))
    """
    annotation: Any
    strict: bool = False
    _adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_adapter", TypeAdapter(self.annotation))

    def validate(self, value: Any) -> Result[Any, AppError]:
        try:
            return Ok(self._adapter.validate_python(value, strict=self.strict))
        except PydanticValidationError as e:
            first = e.errors()[0]
            loc = ".".join(str(p) for p in first.get("loc", ()))
            message = f"{loc}: {first['msg']}" if loc else first["msg"]
            return validation_error(message, constraint=first.get("type"), error_count=e.error_count())


@dataclass(frozen=True, slots=True)
class Custom(FieldValidator):
    """Validator from a function returning a Result.

    Usage:
        def even(n):
            return Ok(n) if n % 2 == 0 else validation_error("not even")

        Field(validator=Custom(even, name="even"))
    """
    fn: Callable[[Any], Result[Any, AppError]]
    name: str = "custom"

    def validate(self, value: Any) -> Result[Any, AppError]:
        try:
            return self.fn(value)
        except Exception as e:
            log.warning("custom_validator_failed", validator=self.name, error=str(e))
            return validation_error(f"validation error: {e}", constraint=self.name)


def custom(name: str) -> Callable[[Callable[[Any], Result[Any, AppError]]], Custom]:
    """Decorator to create a custom validator from a function."""
    return lambda fn: Custom(fn, name=name)
