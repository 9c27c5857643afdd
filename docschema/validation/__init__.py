"""Field validators and the time parser.

Usage:
    from docschema.validation import String, Integer, Array

    Field(validator=String(max_len=32) & String(regexp=r"^\\w+$"))
    Field(validator=Array(values=Integer(minimum=0)))
"""
from .validators import (
    # Scalars
    String,
    Integer,
    Float,
    Bool,
    Null,
    # Formats
    Time,
    parse_time,
    URL,
    IP,
    # Collections
    Array,
    Dict,
    # Combinators
    AllOf,
    AnyOf,
    # Adapters
    TypeAdapterValidator,
    Custom,
    custom,
)

__all__ = [
    "parse_time",
    "String",
    "Integer",
    "Float",
    "Bool",
    "Null",
    "Time",
    "URL",
    "IP",
    "Array",
    "Dict",
    "AllOf",
    "AnyOf",
    "TypeAdapterValidator",
    "Custom",
    "custom",
]
