"""Change-set markers."""
from enum import Enum
from typing import Any


class Marker(Enum):
    """Values that only ever live inside a change-set.

    A marker is its own type, so it can never be confused with user data
    (which is limited to None, bool, numbers, strings, lists and dicts).
    """
    TOMBSTONE = "tombstone"

    def __repr__(self) -> str:
        return f"<{self.name.title()}>"


# Marks a field for removal from the resolved document
TOMBSTONE = Marker.TOMBSTONE


def is_tombstone(value: Any) -> bool:
    return value is Marker.TOMBSTONE
