"""Schema Generators

Generate JSON Schema (draft 2020-12) from schema definitions so clients
can validate payloads before they are sent. The Schema stays the single
source of truth; the generated document is a best-effort description of
it. Custom validators, hooks and dependencies have no JSON Schema form and
are left out.
"""
from __future__ import annotations

import json
from typing import Any

from docschema.schema import Field, FieldValidator, Schema
from docschema.validation import (
    IP,
    URL,
    AllOf,
    AnyOf,
    Array,
    Bool,
    Dict,
    Float,
    Integer,
    Null,
    String,
    Time,
)

DRAFT = "https://json-schema.org/draft/2020-12/schema"


class JSONSchemaGenerator:
    """Generate JSON Schema (draft 2020-12).

    Usage:
        generator = JSONSchemaGenerator(title="user")
        print(generator.dumps(users))
    """

    def __init__(self, title: str | None = None, include_read_only: bool = True):
        self.title, self.include_read_only = title, include_read_only

    def generate(self, schema: Schema) -> dict[str, Any]:
        json_schema = {"$schema": DRAFT}
        if self.title:
            json_schema["title"] = self.title
        json_schema.update(self._object(schema))
        return json_schema

    def dumps(self, schema: Schema, indent: int = 2) -> str:
        return json.dumps(self.generate(schema), indent=indent, default=str)

    def _object(self, schema: Schema) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        required: list[str] = []
        for name, field in schema.fields.items():
            if field.hidden or (field.read_only and not self.include_read_only):
                continue
            properties[name] = self._field(field)
            if field.required:
                required.append(name)

        result: dict[str, Any] = {"type": "object"}
        if schema.description:
            result["description"] = schema.description
        result["properties"] = properties
        if required:
            result["required"] = required
        result["additionalProperties"] = False
        return result

    def _field(self, field: Field) -> dict[str, Any]:
        if field.schema is not None:
            prop = self._object(field.schema)
        elif field.validator is not None:
            prop = self._validator(field.validator)
        else:
            prop = {}
        if field.description:
            prop["description"] = field.description
        if field.read_only:
            prop["readOnly"] = True
        if field.default is not None:
            prop["default"] = field.default
        return prop

    def _validator(self, validator: FieldValidator) -> dict[str, Any]:
        match validator:
            case String():
                return self._string(validator)
            case Integer():
                return self._number("integer", validator.minimum, validator.maximum, validator.allowed)
            case Float():
                return self._number("number", validator.minimum, validator.maximum)
            case Bool():
                return {"type": "boolean"}
            case Null():
                return {"type": "null"}
            case Time():
                return {"type": "string", "format": "date-time"}
            case URL():
                return {"type": "string", "format": "uri"}
            case IP(version=4):
                return {"type": "string", "format": "ipv4"}
            case IP(version=6):
                return {"type": "string", "format": "ipv6"}
            case IP():
                return {"anyOf": [{"type": "string", "format": "ipv4"}, {"type": "string", "format": "ipv6"}]}
            case Array():
                prop: dict[str, Any] = {"type": "array"}
                if validator.values is not None:
                    prop["items"] = self._validator(validator.values)
                if validator.min_len is not None:
                    prop["minItems"] = validator.min_len
                if validator.max_len is not None:
                    prop["maxItems"] = validator.max_len
                return prop
            case Dict():
                prop = {"type": "object"}
                if validator.values is not None:
                    prop["additionalProperties"] = self._validator(validator.values)
                if validator.keys is not None:
                    prop["propertyNames"] = self._validator(validator.keys)
                return prop
            case AllOf():
                return {"allOf": [self._validator(v) for v in validator.validators]}
            case AnyOf():
                return {"anyOf": [self._validator(v) for v in validator.validators]}
            case _:
                return {}

    @staticmethod
    def _string(validator: String) -> dict[str, Any]:
        prop: dict[str, Any] = {"type": "string"}
        if validator.min_len is not None:
            prop["minLength"] = validator.min_len
        if validator.max_len is not None:
            prop["maxLength"] = validator.max_len
        if validator.regexp is not None:
            prop["pattern"] = validator.regexp
        if validator.allowed is not None:
            prop["enum"] = list(validator.allowed)
        return prop

    @staticmethod
    def _number(type_: str, minimum, maximum, allowed=None) -> dict[str, Any]:
        prop: dict[str, Any] = {"type": type_}
        if minimum is not None:
            prop["minimum"] = minimum
        if maximum is not None:
            prop["maximum"] = maximum
        if allowed is not None:
            prop["enum"] = list(allowed)
        return prop
