"""Request-scoped handle passed through field hooks."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from docschema.errors import AppErrorException, ErrorCode, schema_error
from docschema.logging import generate_correlation_id


class RequestCancelled(AppErrorException):
    """Raised by hooks that honour cancellation of their request."""

    def __init__(self, correlation_id: str):
        super().__init__(schema_error("request cancelled", code=ErrorCode.E7005_REQUEST_CANCELLED,
            origin="context", correlation_id=correlation_id))


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Cooperative cancellation handle and request metadata.

    The schema never reads it; it is handed unchanged to every hook so
    hook implementations can check ``cancelled`` or look up ``metadata``
    (e.g. the acting user).
    """
    correlation_id: str = field(default_factory=generate_correlation_id)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    _cancel_event: threading.Event = field(default_factory=threading.Event, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def background(cls) -> RequestContext:
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        self._cancel_event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled(self.correlation_id)

    def with_metadata(self, **kwargs) -> RequestContext:
        """Derive a context with extra metadata; cancelling either cancels both."""
        child = RequestContext(correlation_id=self.correlation_id, metadata={**self.metadata, **kwargs})
        object.__setattr__(child, "_cancel_event", self._cancel_event)
        return child
