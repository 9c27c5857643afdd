"""Structural equality used to diff a payload against its original."""
from collections.abc import Mapping, Sequence
from typing import Any

from docschema.config import get_settings


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _equal(a: Any, b: Any, strict: bool) -> bool:
    if a is b:
        return True
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(_equal(a[k], b[k], strict) for k in a)
    if _is_sequence(a) and _is_sequence(b):
        if strict and type(a) is not type(b):
            return False
        return len(a) == len(b) and all(_equal(x, y, strict) for x, y in zip(a, b))
    if strict and type(a) is not type(b):
        return False
    return a == b


def deep_equal(a: Any, b: Any, *, strict: bool | None = None) -> bool:
    """Compare two document values structurally.

    Mappings are equal when they hold the same keys with equal values,
    sequences when they hold equal items in the same order. In strict mode
    scalars (and sequences) must also share their concrete type, so
    ``True != 1`` and ``1 != 1.0``. Strictness defaults to STRICT_EQUALITY.
    """
    if strict is None:
        strict = get_settings().STRICT_EQUALITY
    return _equal(a, b, strict)
