"""Error Reports

An error report maps a field name (or a dotted path for dependency
errors) to the ordered list of its errors. An error is either a message
string or the nested report of a sub-document.
"""
from copy import deepcopy
from typing import Any

ErrorReport = dict[str, list[Any]]

READ_ONLY = "read-only"
REQUIRED = "required"
INVALID_FIELD = "invalid field"
NOT_A_DICT = "not a dict"
DEPENDENCY_UNMET = "does not match dependency"


def add_field_error(errs: ErrorReport, field: str, error: Any) -> None:
    errs.setdefault(field, []).append(error)


def merge_field_errors(errs: ErrorReport, other: ErrorReport) -> None:
    """Merge ``other`` into ``errs``.

    Messages are appended in order. A nested report is merged into the
    first nested report already recorded for the same field.
    """
    for field, values in other.items():
        dest = errs.setdefault(field, [])
        for value in values:
            if isinstance(value, dict):
                nested = next((d for d in dest if isinstance(d, dict)), None)
                if nested is not None:
                    merge_field_errors(nested, value)
                    continue
                value = deepcopy(value)
            dest.append(value)
