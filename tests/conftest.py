import logging

import pytest
import structlog

from docschema import Field, RequestContext, Schema
from docschema.logging import configure_default_level
from docschema.validation import Integer, String


@pytest.fixture()
def debug_logs():
    """Let DEBUG events through for the duration of a test."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG))
    yield
    structlog.reset_defaults()
    configure_default_level()


@pytest.fixture()
def ctx():
    return RequestContext(metadata={"user": "tester"})


@pytest.fixture()
def person():
    """name: required string, age: int defaulting to 0."""
    schema = Schema(description="person", fields={
        "name": Field(required=True, validator=String()),
        "age": Field(default=0, validator=Integer()),
    })
    schema.compile()
    return schema


@pytest.fixture()
def address_schema():
    return Schema(description="address", fields={
        "street": Field(required=True, validator=String()),
        "country": Field(default="FR", validator=String(min_len=2, max_len=2)),
    })


@pytest.fixture()
def customer(address_schema):
    schema = Schema(description="customer", fields={
        "name": Field(required=True, validator=String()),
        "address": Field(schema=address_schema),
    })
    schema.compile()
    return schema
