"""Document Schema

A Schema is an ordered set of named Fields. It turns an incoming payload
into a resolved document in two steps that always run as a pair:

    changes, base = schema.prepare(ctx, payload, original, replace=...)
    doc, errs = schema.validate(changes, base)

``prepare`` works out what the caller is changing (``changes``) and what
is carried over from the original document or computed by defaults and
hooks (``base``). ``validate`` merges the two, checks every field and
returns the resolved document with an error report. A non-empty report
means the operation should be rejected; ``doc`` is then best-effort.
"""
from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from copy import deepcopy
from typing import Any

from docschema.errors import CompileError, Err, InvalidUsageError, Ok, SerializeError
from docschema.logging import schema_logger

from .context import RequestContext
from .dependency import DependencyEvaluator, compile_dependencies
from .equality import deep_equal
from .field import Field
from .report import (
    INVALID_FIELD,
    NOT_A_DICT,
    READ_ONLY,
    REQUIRED,
    ErrorReport,
    add_field_error,
    merge_field_errors,
)
from .tombstone import TOMBSTONE, is_tombstone

log = schema_logger()

Document = dict[str, Any]


class Schema:
    """Ordered collection of named fields.

    Usage:
        users = Schema(description="user", fields={
            "name": Field(required=True, validator=String()),
            "age": Field(default=0, validator=Integer()),
        })
        users.compile()
    """

    __slots__ = ("description", "fields", "_compiled", "_dependencies")

    def __init__(self, fields: Mapping[str, Field] | None = None, description: str = ""):
        self.description = description
        self.fields: dict[str, Field] = dict(fields or {})
        self._compiled = False
        self._dependencies: DependencyEvaluator | None = None

    def __repr__(self) -> str:
        return f"Schema(description={self.description!r}, fields={list(self.fields)!r})"

    @property
    def is_compiled(self) -> bool:
        return self._compiled

    # ------------------------------------------------------------------
    # Compile
    # ------------------------------------------------------------------

    def compile(self) -> None:
        """Check the whole schema tree and prepare its dependencies.

        Fails fast with CompileError on the first misdeclared field; the
        error path names the offending field (``parent.child``).
        """
        self._compile(self)
        self._dependencies = DependencyEvaluator(self)
        log.debug("schema_compiled", description=self.description or None, fields=len(self.fields))

    def _compile(self, root: Schema) -> None:
        compile_dependencies(self, root)
        for name, field in self.fields.items():
            try:
                field.compile(root)
            except CompileError as e:
                raise e.prefixed(name) from e
        self._compiled = True

    def _ensure_compiled(self) -> None:
        if not self._compiled:
            raise InvalidUsageError("schema must be compiled before use")

    # ------------------------------------------------------------------
    # Serialize
    # ------------------------------------------------------------------

    def serialize(self, payload: MutableMapping[str, Any]) -> None:
        """Rewrite an outgoing payload in place.

        Hidden fields are removed, values of fields whose validator is a
        FieldSerializer are replaced by their serialized form and nested
        documents are processed recursively. Unknown keys are left alone.
        Raises SerializeError naming the offending field path.
        """
        for name, value in list(payload.items()):
            field = self.fields.get(name)
            if field is None:
                continue
            if field.hidden:
                del payload[name]
                continue
            if (serializer := field.serializer) is not None:
                match serializer.serialize(value):
                    case Ok(serialized):
                        payload[name] = serialized
                    case Err(error):
                        raise SerializeError(name, error.message, cause=error)
            if field.schema is not None and isinstance(value, MutableMapping):
                try:
                    field.schema.serialize(value)
                except SerializeError as e:
                    raise e.prefixed(name) from e

    # ------------------------------------------------------------------
    # Field lookup
    # ------------------------------------------------------------------

    def get_field(self, name: str) -> Field | None:
        """Return the field for a name, or None.

        Sub-fields are reachable with dotted notation (``field.subfield``).
        """
        head, sep, rest = name.partition(".")
        field = self.fields.get(head)
        if not sep:
            return field
        if field is None or field.schema is None:
            return None
        return field.schema.get_field(rest)

    # ------------------------------------------------------------------
    # Prepare
    # ------------------------------------------------------------------

    def prepare(
        self,
        ctx: RequestContext,
        payload: Mapping[str, Any],
        original: Mapping[str, Any] | None = None,
        *,
        replace: bool = False,
    ) -> tuple[Document, Document]:
        """Split a payload into a change-set and a base document.

        Without ``original`` the payload is a new document: defaults fill
        omitted fields and ``on_init`` hooks run.

        With ``original`` the payload updates it: only fields that differ
        from the original land in ``changes`` and ``on_update`` hooks run.

        With ``replace=True`` the payload replaces the original: fields of
        the original missing from the payload are marked with TOMBSTONE (a
        hidden, writable field keeps its previous value instead, since the
        client never saw it) and ``on_init`` hooks run.

        Keys unknown to the schema are copied into ``changes`` for
        ``validate`` to reject.
        """
        self._ensure_compiled()
        if replace and original is None:
            raise InvalidUsageError("cannot use replace=True without an original document")
        changes, base = self._prepare(ctx, payload, original, replace)
        log.debug(
            "prepare_completed",
            mode="create" if original is None else ("replace" if replace else "update"),
            changes=len(changes),
            base=len(base),
            correlation_id=getattr(ctx, "correlation_id", None),
        )
        return changes, base

    def _prepare(
        self,
        ctx: RequestContext,
        payload: Mapping[str, Any],
        original: Mapping[str, Any] | None,
        replace: bool,
    ) -> tuple[Document, Document]:
        changes: Document = {}
        base: Document = {}
        for name, field in self.fields.items():
            found = name in payload
            value = payload.get(name)
            if original is None:
                if value is None:
                    if field.default is not None:
                        base[name] = deepcopy(field.default)
                else:
                    changes[name] = value
            else:
                o_found = name in original
                o_value = original.get(name)
                if found and (not o_found or not deep_equal(value, o_value)):
                    changes[name] = value
                if not found and o_found and replace:
                    changes[name] = o_value if field.hidden and not field.read_only else TOMBSTONE
                if o_found:
                    base[name] = o_value

            if field.schema is not None:
                self._prepare_subdocument(ctx, name, field, payload, original, replace, changes, base)

            hook = field.on_init if original is None or replace else field.on_update
            if hook is None:
                continue
            if name in changes and not is_tombstone(changes[name]):
                changes[name] = hook.apply(ctx, changes[name])
                continue
            # A removed field is no longer a user change; the hook sees what remains
            changes.pop(name, None)
            result = hook.apply(ctx, base.get(name))
            if result is not None or name in base:
                base[name] = result

        for name, value in payload.items():
            if name not in self.fields:
                changes[name] = value
        return changes, base

    def _prepare_subdocument(
        self,
        ctx: RequestContext,
        name: str,
        field: Field,
        payload: Mapping[str, Any],
        original: Mapping[str, Any] | None,
        replace: bool,
        changes: Document,
        base: Document,
    ) -> None:
        sub_original: Mapping[str, Any] | None = None
        if original is not None:
            o_value = original.get(name)
            sub_original = o_value if isinstance(o_value, Mapping) else {}

        if name in payload:
            value = payload[name]
            if not isinstance(value, Mapping):
                # Left as is for validate to report
                return
            sub_changes, sub_base = field.schema._prepare(ctx, value, sub_original, replace)
            if sub_changes or original is None or name not in original:
                changes[name] = sub_changes
            else:
                changes.pop(name, None)
            if sub_base or name in base:
                base[name] = sub_base
        elif name not in changes:
            # Nothing supplied: still collect nested defaults and hook results
            sub_changes, sub_base = field.schema._prepare(ctx, {}, sub_original, replace)
            if sub_changes:
                changes[name] = sub_changes
            if sub_base:
                base[name] = sub_base

    # ------------------------------------------------------------------
    # Validate
    # ------------------------------------------------------------------

    def validate(self, changes: Mapping[str, Any], base: Mapping[str, Any]) -> tuple[Document, ErrorReport]:
        """Apply ``changes`` onto ``base`` and check the result.

        Returns the resolved document (values normalized by their
        validators) and the error report. Never raises for bad data.
        """
        self._ensure_compiled()
        doc, errs = self._validate(changes, base, is_root=True)
        log.debug("validate_completed", fields=len(doc), errors=len(errs))
        return doc, errs

    def _validate(self, changes: Mapping[str, Any], base: Mapping[str, Any],
                  is_root: bool = False) -> tuple[Document, ErrorReport]:
        errs: ErrorReport = {}
        for name, field in self.fields.items():
            in_changes = name in changes
            if field.read_only and in_changes:
                add_field_error(errs, name, READ_ONLY)
            if field.required:
                if in_changes:
                    if changes[name] is None:
                        add_field_error(errs, name, REQUIRED)
                elif base.get(name) is None:
                    add_field_error(errs, name, REQUIRED)
            if field.schema is not None and not in_changes and name not in base:
                # Surface required errors of a sub-document nobody supplied
                _, sub_errs = field.schema._validate({}, {})
                if sub_errs:
                    add_field_error(errs, name, sub_errs)

        doc = self._merge(changes, base)

        if is_root and self._dependencies is not None:
            merge_field_errors(errs, self._dependencies.evaluate(changes, doc))

        for name in list(doc):
            field = self.fields.get(name)
            if field is None:
                add_field_error(errs, name, INVALID_FIELD)
                continue
            if field.schema is not None:
                sub_changes = self._subdocument(changes, name, errs)
                sub_base = self._subdocument(base, name, errs)
                sub_doc, sub_errs = field.schema._validate(sub_changes, sub_base)
                if sub_errs:
                    add_field_error(errs, name, sub_errs)
                else:
                    doc[name] = sub_doc
            elif field.validator is not None:
                match field.validator.validate(doc[name]):
                    case Ok(normalized):
                        doc[name] = normalized
                    case Err(error):
                        add_field_error(errs, name, error.message)
        return doc, errs

    def _merge(self, changes: Mapping[str, Any], base: Mapping[str, Any]) -> Document:
        """Overlay ``changes`` on ``base``; a TOMBSTONE deletes the key.

        Sub-documents are overlaid recursively so the merged view is
        complete before dependencies are evaluated.
        """
        doc: Document = dict(base)
        for name, value in changes.items():
            if is_tombstone(value):
                doc.pop(name, None)
                continue
            field = self.fields.get(name)
            if field is not None and field.schema is not None and isinstance(value, Mapping):
                prior = doc.get(name)
                doc[name] = field.schema._merge(value, prior if isinstance(prior, Mapping) else {})
            else:
                doc[name] = value
        return doc

    @staticmethod
    def _subdocument(source: Mapping[str, Any], name: str, errs: ErrorReport) -> Mapping[str, Any]:
        if name not in source:
            return {}
        value = source[name]
        if isinstance(value, Mapping):
            return value
        add_field_error(errs, name, NOT_A_DICT)
        return {}
