"""Field Lifecycle Hooks

A hook normalizes or computes a field value during Prepare. ``on_init``
runs when a document is created or replaced, ``on_update`` when it is
patched. Hooks have no error channel: they return a value.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

from .context import RequestContext

HookFn = Callable[[RequestContext, Any], Any]


class FieldHook(ABC):
    """Base class for field hooks."""

    @abstractmethod
    def apply(self, ctx: RequestContext, value: Any) -> Any:
        """Return the value to store for the field."""

    def __call__(self, ctx: RequestContext, value: Any) -> Any:
        return self.apply(ctx, value)


@dataclass(frozen=True, slots=True)
class FunctionHook(FieldHook):
    """Hook from a plain ``(ctx, value) -> value`` function."""
    fn: HookFn
    name: str = "function"

    def apply(self, ctx: RequestContext, value: Any) -> Any:
        return self.fn(ctx, value)


@dataclass(frozen=True, slots=True)
class Now(FieldHook):
    """Always sets the field to the current UTC time."""

    def apply(self, ctx: RequestContext, value: Any) -> Any:
        return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class NewID(FieldHook):
    """Generates a random hex identifier when the field has no value."""

    def apply(self, ctx: RequestContext, value: Any) -> Any:
        if value is None:
            return uuid4().hex
        return value


def as_hook(hook: FieldHook | HookFn | None) -> FieldHook | None:
    """Accept a FieldHook or a bare function."""
    if hook is None or isinstance(hook, FieldHook):
        return hook
    if callable(hook):
        return FunctionHook(hook, name=getattr(hook, "__name__", "function"))
    raise TypeError(f"hook must be a FieldHook or a callable, got {type(hook).__name__}")


def hook(fn: HookFn) -> FunctionHook:
    """Decorator to create a hook from a function.

    Usage:
        @hook
        def lowercase(ctx, value):
            return value.lower() if isinstance(value, str) else value
    """
    return FunctionHook(fn, name=fn.__name__)
