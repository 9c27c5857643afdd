"""Common Fields

Ready-made fields for the bookkeeping attributes most resources carry.
Each call returns a fresh Field so callers may wrap it with
``dataclasses.replace`` without affecting other schemas.

Usage:
    Schema(fields={
        "id": id_field(),
        "created": created_field(),
        "updated": updated_field(),
        "title": Field(required=True, validator=String()),
    })
"""
from docschema.schema import Field, NewID, Now
from docschema.validation import String, Time

ID_PATTERN = r"^[0-9a-f]{32}$"


def id_field() -> Field:
    """Read-only identifier generated on creation when not supplied."""
    return Field(
        description="The item's id",
        required=True,
        read_only=True,
        on_init=NewID(),
        validator=String(regexp=ID_PATTERN),
    )


def created_field() -> Field:
    """Read-only creation time, set once."""
    return Field(
        description="The time at which the item has been inserted",
        required=True,
        read_only=True,
        on_init=Now(),
        validator=Time(),
    )


def updated_field() -> Field:
    """Read-only modification time, refreshed on every write."""
    return Field(
        description="The time at which the item has been last updated",
        required=True,
        read_only=True,
        on_init=Now(),
        on_update=Now(),
        validator=Time(),
    )
