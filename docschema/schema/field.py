"""Field Descriptors and Field Capabilities

A Field is static configuration. The only behavior it owns is its
compile-time check; everything else is driven by the Schema.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docschema.errors import AppError, CompileError, Result
from docschema.logging import schema_logger

from .hooks import FieldHook, HookFn, as_hook

if TYPE_CHECKING:
    from .dependency import Dependency
    from .schema import Schema

log = schema_logger()


class FieldValidator(ABC):
    """Normalizes and checks a single field value.

    Validators compose with ``&`` (all must pass, normalization chained)
    and ``|`` (first passing validator wins).
    """

    @abstractmethod
    def validate(self, value: Any) -> Result[Any, AppError]:
        """Return Ok(normalized value) or Err describing the problem."""

    def __and__(self, other: FieldValidator) -> FieldValidator:
        from docschema.validation.validators import AllOf
        return AllOf(self, other)

    def __or__(self, other: FieldValidator) -> FieldValidator:
        from docschema.validation.validators import AnyOf
        return AnyOf(self, other)


class FieldSerializer(ABC):
    """Transforms a stored value into its outgoing representation."""

    @abstractmethod
    def serialize(self, value: Any) -> Result[Any, AppError]:
        """Return Ok(serialized value) or Err."""


class Compilable(ABC):
    """Configuration that can be checked (and pre-computed) once."""

    @abstractmethod
    def compile(self) -> None:
        """Raise on misconfiguration."""


@dataclass(frozen=True, slots=True)
class Field:
    """Per-field configuration.

    Attributes:
        description: Documentation only
        required: Reject documents where the field is absent or null
        read_only: Reject change-sets that touch the field
        hidden: Never echoed back by Schema.serialize
        default: Value placed in the base of a new document when omitted
        validator: Value validator (ignored when ``schema`` is set)
        schema: Nested sub-schema the value must satisfy
        on_init: Hook run on create and replace
        on_update: Hook run on update
        dependency: Condition the root document must satisfy when the field changes
    """
    description: str = ""
    required: bool = False
    read_only: bool = False
    hidden: bool = False
    default: Any = None
    validator: FieldValidator | None = None
    schema: Schema | None = None
    on_init: FieldHook | HookFn | None = None
    on_update: FieldHook | HookFn | None = None
    dependency: Dependency | None = None

    def __post_init__(self):
        object.__setattr__(self, "on_init", as_hook(self.on_init))
        object.__setattr__(self, "on_update", as_hook(self.on_update))

    @property
    def serializer(self) -> FieldSerializer | None:
        if self.schema is None and isinstance(self.validator, FieldSerializer):
            return self.validator
        return None

    def compile(self, root: Schema | None = None) -> None:
        """Compile the nested schema or, failing that, the validator.

        Raises CompileError with a path relative to this field.
        """
        if self.schema is not None:
            if self.validator is not None:
                log.warning("field_validator_ignored", validator=type(self.validator).__name__)
            self.schema._compile(root if root is not None else self.schema)
        elif isinstance(self.validator, Compilable):
            try:
                self.validator.compile()
            except CompileError:
                raise
            except Exception as e:
                raise CompileError(str(e), cause=e) from e
