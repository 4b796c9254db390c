"""Parsing of Avro schema definitions from JSON text."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from .base import (
    ArraySchema,
    DecimalLogicalSchema,
    FixedSchema,
    LogicalSchema,
    LogicalType,
    MapSchema,
    NullSchema,
    PrimitiveLogicalSchema,
    PrimitiveSchema,
    RefSchema,
    Schema,
    SchemaCache,
    SchemaError,
    Type,
    UnionSchema,
)
from .named import NO_DEFAULT, EnumSchema, Field, RecordSchema

DEFAULT_SCHEMA_CACHE = SchemaCache()
"""The cache used by :func:`parse` and :func:`parse_files`."""

_PRIMITIVE_NAMES = frozenset(
    t.value
    for t in (
        Type.STRING,
        Type.BYTES,
        Type.INT,
        Type.LONG,
        Type.FLOAT,
        Type.DOUBLE,
        Type.BOOLEAN,
    )
)

_PRIMITIVE_LOGICAL = frozenset(
    {
        (Type.STRING, LogicalType.UUID),
        (Type.INT, LogicalType.DATE),
        (Type.INT, LogicalType.TIME_MILLIS),
        (Type.LONG, LogicalType.TIME_MICROS),
        (Type.LONG, LogicalType.TIMESTAMP_MILLIS),
        (Type.LONG, LogicalType.TIMESTAMP_MICROS),
    }
)


def parse(schema: str) -> Schema:
    """Parse a schema string using the default cache."""
    return parse_with_cache(schema, "", DEFAULT_SCHEMA_CACHE)


def parse_with_cache(
    schema: str, namespace: str = "", cache: SchemaCache | None = None
) -> Schema:
    """Parse a schema string within the given namespace, using the given cache.

    Text that is not valid JSON is taken as a bare type name.
    """
    if cache is None:
        cache = DEFAULT_SCHEMA_CACHE
    try:
        value: Any = json.loads(schema)
    except json.JSONDecodeError:
        value = schema
    return _parse_type(namespace, value, cache)


def parse_files(*args: str | Path) -> Schema | None:
    """Parse the schema files in order and return the last schema.

    Later files may refer to names defined in earlier ones.
    """
    schema: Schema | None = None
    for path in args:
        text = Path(path).read_text(encoding="utf-8")
        schema = parse(text)
    return schema


def _parse_type(namespace: str, value: Any, cache: SchemaCache) -> Schema:
    if value is None:
        return NullSchema()
    if isinstance(value, str):
        return _parse_primitive_type(namespace, value, cache)
    if isinstance(value, dict):
        return _parse_complex_type(namespace, value, cache)
    if isinstance(value, list):
        return _parse_union(namespace, value, cache)
    raise SchemaError(f"unknown type: {value!r}")


def _parse_primitive_type(namespace: str, name: str, cache: SchemaCache) -> Schema:
    if name == Type.NULL.value:
        return NullSchema()
    if name in _PRIMITIVE_NAMES:
        return PrimitiveSchema(Type(name))
    schema = cache.get(_full_name(namespace, name))
    if schema is None:
        raise SchemaError(f"unknown type: {name}")
    return schema


def _parse_complex_type(namespace: str, m: dict[str, Any], cache: SchemaCache) -> Schema:
    typ = m.get("type")
    if isinstance(typ, list):
        return _parse_union(namespace, typ, cache)
    if not isinstance(typ, str):
        raise SchemaError(f"unknown type: {m!r}")

    if typ == Type.NULL.value:
        return NullSchema()
    if typ in _PRIMITIVE_NAMES:
        kind = Type(typ)
        return PrimitiveSchema(kind, _primitive_logical_type(kind, m))
    if typ in (Type.RECORD.value, Type.ERROR.value):
        return _parse_record(Type(typ), namespace, m, cache)
    if typ == Type.ENUM.value:
        return _parse_enum(namespace, m, cache)
    if typ == Type.ARRAY.value:
        return _parse_array(namespace, m, cache)
    if typ == Type.MAP.value:
        return _parse_map(namespace, m, cache)
    if typ == Type.FIXED.value:
        return _parse_fixed(namespace, m, cache)
    return _parse_primitive_type(namespace, typ, cache)


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _logical_type(m: dict[str, Any]) -> LogicalType | None:
    name = m.get("logicalType")
    if not isinstance(name, str):
        return None
    try:
        return LogicalType(name)
    except ValueError:
        return None


def _primitive_logical_type(typ: Type, m: dict[str, Any]) -> LogicalSchema | None:
    logical = _logical_type(m)
    if logical is None:
        return None
    if (typ, logical) in _PRIMITIVE_LOGICAL:
        return PrimitiveLogicalSchema(logical)
    if typ is Type.BYTES and logical is LogicalType.DECIMAL:
        return _decimal_logical_type(-1, m)
    return None


def _fixed_logical_type(size: int, m: dict[str, Any]) -> LogicalSchema | None:
    logical = _logical_type(m)
    if logical is LogicalType.DURATION and size == 12:
        return PrimitiveLogicalSchema(LogicalType.DURATION)
    if logical is LogicalType.DECIMAL:
        return _decimal_logical_type(size, m)
    return None


def _decimal_logical_type(size: int, m: dict[str, Any]) -> DecimalLogicalSchema | None:
    precision = _number(m.get("precision"))
    if precision is None or precision <= 0:
        return None
    if size > 0:
        max_precision = round(math.floor(math.log10(2) * (8 * size - 1)))
        if precision > max_precision:
            return None
    scale = _number(m.get("scale")) or 0.0
    if scale < 0 or scale > precision:
        return None
    return DecimalLogicalSchema(int(precision), int(scale))


def _parse_record(
    typ: Type, namespace: str, m: dict[str, Any], cache: SchemaCache
) -> RecordSchema:
    name, new_namespace = _resolve_full_name(m)
    if new_namespace:
        namespace = new_namespace

    raw_fields = m.get("fields")
    if not isinstance(raw_fields, list):
        raise SchemaError("record must have an array of fields")

    record = RecordSchema(
        name, namespace, is_error=typ is Type.ERROR, doc=_resolve_doc(m)
    )
    cache.add(record.full_name, RefSchema(record))
    for key, value in m.items():
        record.add_prop(key, value)

    for raw in raw_fields:
        record.fields.append(_parse_field(namespace, raw, cache))
    return record


def _parse_field(namespace: str, value: Any, cache: SchemaCache) -> Field:
    if not isinstance(value, dict):
        raise SchemaError(f"invalid field: {value!r}")
    name = _resolve_name(value)
    if "type" not in value:
        raise SchemaError("field requires a type")
    typ = _parse_type(namespace, value["type"], cache)
    default = value.get("default", NO_DEFAULT)
    field = Field(name, typ, default, doc=_resolve_doc(value))
    for key, prop in value.items():
        field.add_prop(key, prop)
    return field


def _parse_enum(namespace: str, m: dict[str, Any], cache: SchemaCache) -> EnumSchema:
    name, new_namespace = _resolve_full_name(m)
    if new_namespace:
        namespace = new_namespace

    raw_symbols = m.get("symbols")
    if not isinstance(raw_symbols, list):
        raise SchemaError("enum must have a non-empty array of symbols")
    for symbol in raw_symbols:
        if not isinstance(symbol, str):
            raise SchemaError(f"invalid symbol: {symbol!r}")

    enum = EnumSchema(name, namespace, raw_symbols)
    cache.add(enum.full_name, enum)
    for key, value in m.items():
        enum.add_prop(key, value)
    return enum


def _parse_array(namespace: str, m: dict[str, Any], cache: SchemaCache) -> ArraySchema:
    if "items" not in m:
        raise SchemaError("array must have an items key")
    array = ArraySchema(_parse_type(namespace, m["items"], cache))
    for key, value in m.items():
        array.add_prop(key, value)
    return array


def _parse_map(namespace: str, m: dict[str, Any], cache: SchemaCache) -> MapSchema:
    if "values" not in m:
        raise SchemaError("map must have an values key")
    mapping = MapSchema(_parse_type(namespace, m["values"], cache))
    for key, value in m.items():
        mapping.add_prop(key, value)
    return mapping


def _parse_union(namespace: str, values: list[Any], cache: SchemaCache) -> UnionSchema:
    return UnionSchema([_parse_type(namespace, v, cache) for v in values])


def _parse_fixed(namespace: str, m: dict[str, Any], cache: SchemaCache) -> FixedSchema:
    name, new_namespace = _resolve_full_name(m)
    if new_namespace:
        namespace = new_namespace

    size = _number(m.get("size"))
    if size is None:
        raise SchemaError("fixed must have a size")

    fixed = FixedSchema(name, namespace, int(size), _fixed_logical_type(int(size), m))
    cache.add(fixed.full_name, fixed)
    for key, value in m.items():
        fixed.add_prop(key, value)
    return fixed


def _full_name(namespace: str, name: str) -> str:
    if not namespace or "." in name:
        return name
    return f"{namespace}.{name}"


def _resolve_name(m: dict[str, Any]) -> str:
    name = m.get("name")
    if not isinstance(name, str):
        raise SchemaError("name key required")
    return name


def _resolve_doc(m: dict[str, Any]) -> str:
    doc = m.get("doc")
    return doc if isinstance(doc, str) else ""


def _resolve_full_name(m: dict[str, Any]) -> tuple[str, str]:
    name = _resolve_name(m)
    namespace = m.get("namespace")
    if not isinstance(namespace, str):
        return name, ""
    if not namespace:
        raise SchemaError("namespace key must be non-empty or omitted")
    return name, namespace