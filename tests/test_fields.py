import re
from datetime import datetime

import pytest

from docschema import Field, Schema, created_field, id_field, updated_field
from docschema.fields import ID_PATTERN
from docschema.schema import READ_ONLY
from docschema.validation import String


@pytest.fixture()
def articles():
    schema = Schema(description="article", fields={
        "id": id_field(),
        "created": created_field(),
        "updated": updated_field(),
        "title": Field(required=True, validator=String()),
    })
    schema.compile()
    return schema


def test_factories_return_fresh_fields():
    assert id_field() is not id_field()
    assert updated_field().on_update is not None
    assert created_field().on_update is None


def test_create_fills_bookkeeping_fields(articles, ctx):
    changes, base = articles.prepare(ctx, {"title": "Hello"})
    assert changes == {"title": "Hello"}
    assert re.match(ID_PATTERN, base["id"])
    assert isinstance(base["created"], datetime)
    assert isinstance(base["updated"], datetime)

    doc, errs = articles.validate(changes, base)
    assert errs == {}
    assert doc["title"] == "Hello"


def test_update_refreshes_only_updated(articles, ctx):
    doc, _ = articles.validate(*articles.prepare(ctx, {"title": "Hello"}))
    changes, base = articles.prepare(ctx, {"title": "Bye"}, doc)
    assert changes == {"title": "Bye"}
    assert base["id"] == doc["id"]
    assert base["created"] == doc["created"]
    assert base["updated"] >= doc["updated"]

    updated, errs = articles.validate(changes, base)
    assert errs == {}
    assert updated["title"] == "Bye"


def test_client_supplied_id_is_rejected(articles, ctx):
    changes, base = articles.prepare(ctx, {"id": "mine", "title": "Hello"})
    assert changes["id"] == "mine"
    _, errs = articles.validate(changes, base)
    assert errs == {"id": [READ_ONLY, f"does not match {ID_PATTERN}"]}


def test_resubmitted_document_is_accepted(articles, ctx):
    doc, _ = articles.validate(*articles.prepare(ctx, {"title": "Hello"}))
    changes, base = articles.prepare(ctx, dict(doc), doc)
    _, errs = articles.validate(changes, base)
    assert errs == {}
