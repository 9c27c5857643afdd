import pytest
from structlog.testing import capture_logs

from docschema import TOMBSTONE, ErrorCode, Field, InvalidUsageError, Schema
from docschema.validation import Integer, String


def upper(ctx, value):
    return value.upper() if isinstance(value, str) else value


# ============================================================================
# Create
# ============================================================================

def test_create_applies_defaults_to_base(person, ctx):
    changes, base = person.prepare(ctx, {"name": "Bob"})
    assert changes == {"name": "Bob"}
    assert base == {"age": 0}


def test_create_explicit_null_takes_the_default(person, ctx):
    changes, base = person.prepare(ctx, {"name": "Bob", "age": None})
    assert changes == {"name": "Bob"}
    assert base == {"age": 0}


def test_create_changes_are_exactly_the_supplied_keys(person, ctx):
    changes, base = person.prepare(ctx, {"name": "Bob", "age": 7, "extra": [1]})
    assert changes == {"name": "Bob", "age": 7, "extra": [1]}
    assert base == {}


def test_create_without_default_leaves_base_empty(ctx):
    schema = Schema(fields={"a": Field(), "b": Field(default=None)})
    schema.compile()
    assert schema.prepare(ctx, {}) == ({}, {})


def test_defaults_are_copied(ctx):
    schema = Schema(fields={"tags": Field(default=[])})
    schema.compile()
    _, base = schema.prepare(ctx, {})
    base["tags"].append("x")
    assert schema.fields["tags"].default == []


def test_create_runs_on_init_on_supplied_value(ctx):
    schema = Schema(fields={"code": Field(on_init=upper, on_update=lambda ctx, v: "updated")})
    schema.compile()
    changes, base = schema.prepare(ctx, {"code": "abc"})
    assert changes == {"code": "ABC"}
    assert base == {}


def test_create_runs_on_init_on_default(ctx):
    schema = Schema(fields={"code": Field(default="abc", on_init=upper)})
    schema.compile()
    changes, base = schema.prepare(ctx, {})
    assert changes == {}
    assert base == {"code": "ABC"}


def test_hook_returning_none_on_absent_field_adds_nothing(ctx):
    schema = Schema(fields={"code": Field(on_init=lambda ctx, v: v)})
    schema.compile()
    assert schema.prepare(ctx, {}) == ({}, {})


def test_hook_returning_none_overwrites_carried_value(ctx):
    schema = Schema(fields={"code": Field(on_update=lambda ctx, v: None)})
    schema.compile()
    assert schema.prepare(ctx, {}, {"code": "abc"}) == ({}, {"code": None})
    assert schema.prepare(ctx, {}, {}) == ({}, {})


def test_hooks_receive_the_request_context(ctx):
    seen = []

    def record(c, value):
        seen.append(c)
        return value

    schema = Schema(fields={"code": Field(on_init=record)})
    schema.compile()
    schema.prepare(ctx, {"code": "x"})
    assert seen == [ctx]
    assert seen[0].metadata["user"] == "tester"


# ============================================================================
# Update
# ============================================================================

def test_update_records_only_differences(person, ctx):
    original = {"name": "Bob", "age": 5}
    changes, base = person.prepare(ctx, {"name": "Bob", "age": 6}, original)
    assert changes == {"age": 6}
    assert base == original


def test_update_records_fields_missing_from_original(person, ctx):
    changes, base = person.prepare(ctx, {"age": 3}, {"name": "Bob"})
    assert changes == {"age": 3}
    assert base == {"name": "Bob"}


def test_update_omitted_fields_are_kept(person, ctx):
    changes, base = person.prepare(ctx, {}, {"name": "Bob", "age": 5})
    assert changes == {}
    assert base == {"name": "Bob", "age": 5}


def test_update_does_not_apply_defaults(person, ctx):
    changes, base = person.prepare(ctx, {"name": "Bob"}, {"name": "Bob"})
    assert changes == {}
    assert base == {"name": "Bob"}


def test_update_diffs_structurally(ctx):
    schema = Schema(fields={"tags": Field(), "opts": Field()})
    schema.compile()
    original = {"tags": ["a", "b"], "opts": {"x": 1, "y": [1, 2]}}
    changes, _ = schema.prepare(ctx, {"tags": ["a", "b"], "opts": {"y": [1, 2], "x": 1}}, original)
    assert changes == {}
    changes, _ = schema.prepare(ctx, {"tags": ["b", "a"], "opts": {"x": 1, "y": [1, 2]}}, original)
    assert changes == {"tags": ["b", "a"]}


def test_update_distinguishes_numeric_types(person, ctx):
    changes, _ = person.prepare(ctx, {"age": 5.0}, {"name": "Bob", "age": 5})
    assert changes == {"age": 5.0}


def test_update_runs_on_update_hook(ctx):
    schema = Schema(fields={
        "code": Field(on_init=lambda ctx, v: "init", on_update=upper),
        "stamp": Field(on_update=lambda ctx, v: "touched"),
    })
    schema.compile()
    changes, base = schema.prepare(ctx, {"code": "new"}, {"code": "old", "stamp": "before"})
    assert changes == {"code": "NEW"}
    assert base == {"code": "old", "stamp": "touched"}


# ============================================================================
# Replace
# ============================================================================

def test_replace_tombstones_omitted_fields(person, ctx):
    original = {"name": "Bob", "age": 5}
    changes, base = person.prepare(ctx, {"age": 5}, original, replace=True)
    assert changes == {"name": TOMBSTONE}
    assert base == original


def test_replace_carries_hidden_writable_field(ctx):
    schema = Schema(fields={
        "login": Field(),
        "secret": Field(hidden=True, on_init=upper),
    })
    schema.compile()
    changes, base = schema.prepare(ctx, {"login": "bob"}, {"login": "bob", "secret": "abc"}, replace=True)
    assert changes == {"secret": "ABC"}
    assert base == {"login": "bob", "secret": "abc"}


def test_replace_tombstones_hidden_read_only_field(ctx):
    schema = Schema(fields={"secret": Field(hidden=True, read_only=True)})
    schema.compile()
    changes, _ = schema.prepare(ctx, {}, {"secret": "abc"}, replace=True)
    assert changes == {"secret": TOMBSTONE}


def test_replace_hook_on_tombstone_applies_to_base(ctx):
    schema = Schema(fields={"name": Field(), "tag": Field(on_init=upper)})
    schema.compile()
    changes, base = schema.prepare(ctx, {"name": "Bob"}, {"name": "Bob", "tag": "x"}, replace=True)
    assert changes == {}
    assert base == {"name": "Bob", "tag": "X"}


def test_replace_runs_on_init_not_on_update(ctx):
    schema = Schema(fields={"code": Field(on_init=upper, on_update=lambda ctx, v: "update")})
    schema.compile()
    changes, _ = schema.prepare(ctx, {"code": "new"}, {"code": "old"}, replace=True)
    assert changes == {"code": "NEW"}


def test_replace_without_original_is_misuse(person, ctx):
    with pytest.raises(InvalidUsageError) as exc:
        person.prepare(ctx, {"name": "Bob"}, replace=True)
    assert exc.value.code is ErrorCode.E7003_INVALID_USAGE


# ============================================================================
# Unknown keys and sub-documents
# ============================================================================

def test_unknown_keys_are_copied_verbatim(person, ctx):
    value = {"nested": [1, 2]}
    changes, _ = person.prepare(ctx, {"name": "Bob", "bogus": value}, {"name": "Bob"})
    assert changes == {"bogus": value}


def test_nested_create(customer, ctx):
    changes, base = customer.prepare(ctx, {"name": "Ann", "address": {"street": "Main"}})
    assert changes == {"name": "Ann", "address": {"street": "Main"}}
    assert base == {"address": {"country": "FR"}}


def test_nested_defaults_without_sub_payload(customer, ctx):
    changes, base = customer.prepare(ctx, {"name": "Ann"})
    assert changes == {"name": "Ann"}
    assert base == {"address": {"country": "FR"}}


def test_nested_nothing_to_add_leaves_no_empty_sub_documents(ctx):
    schema = Schema(fields={"meta": Field(schema=Schema(fields={"note": Field()}))})
    schema.compile()
    assert schema.prepare(ctx, {}) == ({}, {})


def test_nested_update_diffs_inside_sub_document(customer, ctx):
    original = {"name": "Ann", "address": {"street": "Main", "country": "FR"}}
    changes, base = customer.prepare(ctx, {"name": "Ann", "address": {"street": "Main", "country": "DE"}}, original)
    assert changes == {"address": {"country": "DE"}}
    assert base == original


def test_nested_update_unchanged_sub_document(customer, ctx):
    original = {"name": "Ann", "address": {"street": "Main", "country": "FR"}}
    changes, base = customer.prepare(ctx, {"address": {"street": "Main", "country": "FR"}}, original)
    assert changes == {}
    assert base == original


def test_nested_replace_tombstones_inner_fields(customer, ctx):
    original = {"name": "Ann", "address": {"street": "Main", "country": "FR"}}
    changes, _ = customer.prepare(ctx, {"name": "Ann", "address": {"street": "Main"}}, original, replace=True)
    assert changes == {"address": {"country": TOMBSTONE}}


def test_nested_non_mapping_is_left_for_validate(customer, ctx):
    changes, base = customer.prepare(ctx, {"name": "Ann", "address": "Main street"})
    assert changes == {"name": "Ann", "address": "Main street"}
    assert base == {}


def test_nested_hooks_run(ctx):
    inner = Schema(fields={"code": Field(on_init=upper)})
    schema = Schema(fields={"meta": Field(schema=inner)})
    schema.compile()
    changes, _ = schema.prepare(ctx, {"meta": {"code": "abc"}})
    assert changes == {"meta": {"code": "ABC"}}


def test_prepare_does_not_mutate_inputs(customer, ctx):
    payload = {"name": "Ann", "address": {"street": "Main"}}
    original = {"name": "Bob", "address": {"street": "Side", "country": "FR"}}
    customer.prepare(ctx, payload, original, replace=True)
    assert payload == {"name": "Ann", "address": {"street": "Main"}}
    assert original == {"name": "Bob", "address": {"street": "Side", "country": "FR"}}


def test_prepare_logs_mode(person, ctx, debug_logs):
    with capture_logs() as logs:
        person.prepare(ctx, {"name": "Bob"}, {"name": "Al"}, replace=True)
    event = next(e for e in logs if e["event"] == "prepare_completed")
    assert event["mode"] == "replace"
    assert event["correlation_id"] == ctx.correlation_id
    assert "Bob" not in event.values()
