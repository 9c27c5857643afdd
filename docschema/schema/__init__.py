"""Schema-driven document reconciliation and validation.

Compile once, then Prepare and Validate every incoming payload:

    schema = Schema(fields={"name": Field(required=True, validator=String())})
    schema.compile()
    changes, base = schema.prepare(RequestContext(), payload, original)
    doc, errs = schema.validate(changes, base)
"""
from .tombstone import Marker, TOMBSTONE, is_tombstone
from .context import RequestContext, RequestCancelled
from .hooks import FieldHook, FunctionHook, Now, NewID, as_hook, hook
from .equality import deep_equal
from .report import (
    ErrorReport,
    READ_ONLY,
    REQUIRED,
    INVALID_FIELD,
    NOT_A_DICT,
    DEPENDENCY_UNMET,
    add_field_error,
    merge_field_errors,
)
from .field import Field, FieldValidator, FieldSerializer, Compilable
from .dependency import (
    Dependency,
    DependencyEvaluator,
    Exists,
    Equals,
    In,
    And,
    Or,
    Not,
    lookup,
)
from .schema import Schema, Document

__all__ = [
    "Marker",
    "TOMBSTONE",
    "is_tombstone",
    "RequestContext",
    "RequestCancelled",
    "FieldHook",
    "FunctionHook",
    "Now",
    "NewID",
    "as_hook",
    "hook",
    "deep_equal",
    "ErrorReport",
    "READ_ONLY",
    "REQUIRED",
    "INVALID_FIELD",
    "NOT_A_DICT",
    "DEPENDENCY_UNMET",
    "add_field_error",
    "merge_field_errors",
    "Field",
    "FieldValidator",
    "FieldSerializer",
    "Compilable",
    "Dependency",
    "DependencyEvaluator",
    "Exists",
    "Equals",
    "In",
    "And",
    "Or",
    "Not",
    "lookup",
    "Schema",
    "Document",
]
