import pytest

from docschema.config import Settings
from docschema.schema import deep_equal


@pytest.mark.parametrize("a, b", [
    (None, None),
    ("a", "a"),
    ([1, [2, {"x": 3}]], [1, [2, {"x": 3}]]),
    ({"a": 1, "b": [1]}, {"b": [1], "a": 1}),
])
def test_equal_values(a, b):
    assert deep_equal(a, b)


@pytest.mark.parametrize("a, b", [
    (1, 1.0),
    (True, 1),
    (False, 0),
    ([1, 2], (1, 2)),
    ({"a": 1}, {"a": 1, "b": None}),
    ([1, 2], [2, 1]),
    ("1", 1),
    (None, {}),
])
def test_strict_differences(a, b):
    assert not deep_equal(a, b, strict=True)


def test_loose_mode_follows_python_equality():
    assert deep_equal(1, 1.0, strict=False)
    assert deep_equal({"a": [1, True]}, {"a": (1.0, 1)}, strict=False)
    assert not deep_equal("1", 1, strict=False)


def test_strictness_comes_from_settings(monkeypatch, person, ctx):
    monkeypatch.setattr("docschema.schema.equality.get_settings", lambda: Settings(STRICT_EQUALITY=False))
    assert deep_equal(1, 1.0)
    changes, _ = person.prepare(ctx, {"age": 5.0}, {"name": "Bob", "age": 5})
    assert changes == {}
