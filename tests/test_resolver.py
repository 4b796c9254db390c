import datetime
from fractions import Fraction

import pytest

from avroschema.base import SchemaError
from avroschema.resolver import TypeResolver


class _Custom:
    pass


def test_primitive_string_names():
    r = TypeResolver()
    assert r.name(str) == ["string"]
    assert r.type("string") is str


def test_int_type_shared_by_int_and_long():
    r = TypeResolver()
    assert r.name(int) == ["int", "long"]
    assert r.type("int") is int
    assert r.type("long") is int


def test_logical_timestamps():
    r = TypeResolver()
    assert r.name(datetime.datetime) == ["long.timestamp-millis", "long.timestamp-micros"]


def test_decimal_resolves_to_fraction():
    r = TypeResolver()
    assert r.type("bytes.decimal") is Fraction


def test_register_round_trip():
    r = TypeResolver()
    r.register("custom", _Custom)

    assert r.type("custom") is _Custom
    assert r.name(_Custom) == ["custom"]


def test_register_instance_uses_its_type():
    r = TypeResolver()
    r.register("custom", _Custom())

    assert r.type("custom") is _Custom
    assert r.name(_Custom()) == ["custom"]


def test_register_appends_names():
    r = TypeResolver()
    r.register("a", _Custom)
    r.register("b", _Custom)

    assert r.name(_Custom) == ["a", "b"]


def test_name_of_every_registered_type_resolves_back():
    r = TypeResolver()
    for name in ("null", "float", "double", "bytes", "boolean", "int.date"):
        assert name in r.name(r.type(name))


def test_unknown_type_raises():
    r = TypeResolver()
    with pytest.raises(SchemaError):
        r.name(_Custom)


def test_unknown_name_raises():
    r = TypeResolver()
    with pytest.raises(SchemaError):
        r.type("unknown")


def test_resolvers_are_independent():
    first = TypeResolver()
    second = TypeResolver()
    first.register("custom", _Custom)

    with pytest.raises(SchemaError):
        second.type("custom")
    assert first.type("custom") is _Custom