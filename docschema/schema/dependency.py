"""Field Dependencies

A dependency is a condition on the ROOT document that must hold whenever
its field is part of the change-set. Conditions compose with ``&``, ``|``
and ``~``. Paths are dotted and always resolved from the root, so a
nested field may depend on a parent or sibling field.

Usage:
    Field(dependency=Exists("kind") & Equals("kind", "premium"))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docschema.errors import CompileError, ErrorCode

from .equality import deep_equal
from .report import DEPENDENCY_UNMET, ErrorReport, add_field_error, merge_field_errors
from .tombstone import is_tombstone

if TYPE_CHECKING:
    from .schema import Schema


def lookup(doc: Mapping[str, Any], path: str) -> tuple[bool, Any]:
    """Resolve a dotted path in a document. Returns (found, value)."""
    value: Any = doc
    for segment in path.split("."):
        if not isinstance(value, Mapping) or segment not in value:
            return False, None
        value = value[segment]
    return True, value


class Dependency(ABC):
    """Base class for dependency conditions."""

    @abstractmethod
    def paths(self) -> tuple[str, ...]:
        """Document paths the condition reads."""

    @abstractmethod
    def match(self, doc: Mapping[str, Any]) -> bool:
        """Whether the resolved root document satisfies the condition."""

    def compile(self, root: Schema) -> None:
        for path in self.paths():
            if root.get_field(path) is None:
                raise CompileError(f"dependency references unknown field '{path}'",
                    code=ErrorCode.E7004_UNKNOWN_DEPENDENCY_FIELD)

    def __and__(self, other: Dependency) -> And: return And(self, other)

    def __or__(self, other: Dependency) -> Or: return Or(self, other)

    def __invert__(self) -> Not: return Not(self)


@dataclass(frozen=True, slots=True)
class Exists(Dependency):
    """The path is present and not null."""
    path: str

    def paths(self) -> tuple[str, ...]: return (self.path,)

    def match(self, doc: Mapping[str, Any]) -> bool:
        found, value = lookup(doc, self.path)
        return found and value is not None


@dataclass(frozen=True, slots=True)
class Equals(Dependency):
    """The path holds the given value."""
    path: str
    value: Any

    def paths(self) -> tuple[str, ...]: return (self.path,)

    def match(self, doc: Mapping[str, Any]) -> bool:
        found, value = lookup(doc, self.path)
        return found and deep_equal(value, self.value, strict=False)


@dataclass(frozen=True, slots=True)
class In(Dependency):
    """The path holds one of the given values."""
    path: str
    values: tuple[Any, ...]

    def __init__(self, path: str, values):
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "values", tuple(values))

    def paths(self) -> tuple[str, ...]: return (self.path,)

    def match(self, doc: Mapping[str, Any]) -> bool:
        found, value = lookup(doc, self.path)
        return found and any(deep_equal(value, v, strict=False) for v in self.values)


@dataclass(frozen=True, slots=True)
class And(Dependency):
    left: Dependency
    right: Dependency

    def paths(self) -> tuple[str, ...]: return self.left.paths() + self.right.paths()

    def match(self, doc: Mapping[str, Any]) -> bool:
        return self.left.match(doc) and self.right.match(doc)


@dataclass(frozen=True, slots=True)
class Or(Dependency):
    left: Dependency
    right: Dependency

    def paths(self) -> tuple[str, ...]: return self.left.paths() + self.right.paths()

    def match(self, doc: Mapping[str, Any]) -> bool:
        return self.left.match(doc) or self.right.match(doc)


@dataclass(frozen=True, slots=True)
class Not(Dependency):
    dependency: Dependency

    def paths(self) -> tuple[str, ...]: return self.dependency.paths()

    def match(self, doc: Mapping[str, Any]) -> bool:
        return not self.dependency.match(doc)


def compile_dependencies(schema: Schema, root: Schema) -> None:
    """Check every dependency declared directly on ``schema`` against ``root``."""
    for name, field in schema.fields.items():
        if field.dependency is None:
            continue
        try:
            field.dependency.compile(root)
        except CompileError as e:
            raise e.prefixed(name) from e


class DependencyEvaluator:
    """Evaluates the dependencies of a compiled schema tree.

    Only the root schema owns an evaluator; nested schemas are walked
    through the change-set.
    """

    __slots__ = ("schema",)

    def __init__(self, schema: Schema):
        self.schema = schema

    def evaluate(self, changes: Mapping[str, Any], doc: Mapping[str, Any]) -> ErrorReport:
        return self._evaluate(self.schema, changes, doc, "")

    def _evaluate(self, schema: Schema, changes: Mapping[str, Any], doc: Mapping[str, Any],
                  prefix: str) -> ErrorReport:
        errs: ErrorReport = {}
        for name, value in changes.items():
            field = schema.fields.get(name)
            if field is None or is_tombstone(value):
                continue
            path = prefix + name
            if field.dependency is not None and not field.dependency.match(doc):
                add_field_error(errs, path, DEPENDENCY_UNMET)
            if field.schema is not None and isinstance(value, Mapping):
                merge_field_errors(errs, self._evaluate(field.schema, value, doc, path + "."))
        return errs
