from docschema.schema import add_field_error, merge_field_errors


def test_add_field_error_appends_in_order():
    errs = {}
    add_field_error(errs, "name", "required")
    add_field_error(errs, "name", "not a string")
    assert errs == {"name": ["required", "not a string"]}


def test_merge_appends_messages():
    errs = {"a": ["x"]}
    merge_field_errors(errs, {"a": ["y"], "b": ["z"]})
    assert errs == {"a": ["x", "y"], "b": ["z"]}


def test_merge_combines_nested_reports():
    errs = {"address": [{"street": ["required"]}]}
    merge_field_errors(errs, {"address": [{"street": ["not a string"], "zip": ["invalid field"]}]})
    assert errs == {"address": [{"street": ["required", "not a string"], "zip": ["invalid field"]}]}


def test_merge_does_not_alias_the_other_report():
    other = {"address": [{"street": ["required"]}]}
    errs = {}
    merge_field_errors(errs, other)
    errs["address"][0]["street"].append("more")
    assert other == {"address": [{"street": ["required"]}]}
