"""Named schemas with fields or symbols: records, errors, enums and record fields."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from .base import (
    FIELD_RESERVED,
    ArraySchema,
    MapSchema,
    NamedSchema,
    Properties,
    Schema,
    SchemaError,
    Type,
    UnionSchema,
    validate_name,
)


class _Missing(Enum):
    NO_DEFAULT = "NO_DEFAULT"

    def __repr__(self) -> str:
        return self.value


NO_DEFAULT = _Missing.NO_DEFAULT
"""Marker for a field that has no default value."""


class _InvalidDefault(Exception):
    pass


def _coerce_default(schema: Schema, value: Any) -> Any:
    """Return the default converted to suit the schema, or raise _InvalidDefault."""
    typ = schema.type

    if typ is Type.NULL:
        if value is None:
            return None
        raise _InvalidDefault

    if typ in (Type.STRING, Type.BYTES, Type.ENUM, Type.FIXED):
        if isinstance(value, str):
            return value
        raise _InvalidDefault

    if typ is Type.BOOLEAN:
        if isinstance(value, bool):
            return value
        raise _InvalidDefault

    if isinstance(value, bool):
        raise _InvalidDefault

    if typ in (Type.INT, Type.LONG):
        if isinstance(value, (int, float)):
            return int(value)
        raise _InvalidDefault

    if typ in (Type.FLOAT, Type.DOUBLE):
        if isinstance(value, (int, float)):
            return float(value)
        raise _InvalidDefault

    if typ is Type.ARRAY:
        if not isinstance(value, list):
            raise _InvalidDefault
        assert isinstance(schema, ArraySchema)
        return [_coerce_default(schema.items, item) for item in value]

    if typ is Type.MAP:
        if not isinstance(value, dict):
            raise _InvalidDefault
        assert isinstance(schema, MapSchema)
        return {key: _coerce_default(schema.values, item) for key, item in value.items()}

    if typ is Type.UNION:
        assert isinstance(schema, UnionSchema)
        if not schema.types:
            raise _InvalidDefault
        return _coerce_default(schema.types[0], value)

    if typ is Type.RECORD:
        if not isinstance(value, dict):
            raise _InvalidDefault
        assert isinstance(schema, RecordSchema)
        result = dict(value)
        for field in schema.fields:
            given = result.get(field.name, field.default) if field.name in result else field.default
            result[field.name] = _coerce_default(field.type, given)
        return result

    raise _InvalidDefault


def validate_default(name: str, schema: Schema, default: Any) -> Any:
    """Check a field default against its schema and return it in normalised form.

    A None default on a schema that cannot hold null is treated as an empty
    default and returned as None.
    """
    if default is None:
        nullable_union = isinstance(schema, UnionSchema) and schema.nullable()
        if schema.type is not Type.NULL and not nullable_union:
            return None
    try:
        return _coerce_default(schema, default)
    except _InvalidDefault:
        raise SchemaError(
            f"invalid default for field {name}. {default!r} not a {schema.type.value}"
        ) from None


class Field(Properties):
    """A field of a record schema."""

    reserved = FIELD_RESERVED

    def __init__(self, name: str, typ: Schema, default: Any = NO_DEFAULT, doc: str = "") -> None:
        super().__init__()
        validate_name(name)
        self.name = name
        self.type = typ
        self.doc = doc
        self.has_default = default is not NO_DEFAULT
        self.default: Any = validate_default(name, typ, default) if self.has_default else None

    def __str__(self) -> str:
        return f'{{"name":"{self.name}","type":{self.type}}}'

    def __repr__(self) -> str:
        return f"Field({self})"

    def to_json(self) -> dict[str, Any]:
        """Return the field as a JSON-compatible dict."""
        out: dict[str, Any] = {"name": self.name, "type": self.type.to_json()}
        if self.has_default:
            out["default"] = self.default
        return out


class RecordSchema(NamedSchema):
    """A record (or error record) schema."""

    def __init__(
        self,
        name: str,
        namespace: str = "",
        fields: Iterable[Field] = (),
        *,
        is_error: bool = False,
        doc: str = "",
    ) -> None:
        super().__init__(name, namespace)
        self.fields: list[Field] = list(fields)
        self.is_error = is_error
        self.doc = doc

    @property
    def type(self) -> Type:
        return Type.RECORD

    @property
    def _kind(self) -> str:
        return Type.ERROR.value if self.is_error else Type.RECORD.value

    def __str__(self) -> str:
        fields = ",".join(str(f) for f in self.fields)
        return f'{{"name":"{self.full_name}","type":"{self._kind}","fields":[{fields}]}}'

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.full_name,
            "type": self._kind,
            "fields": [f.to_json() for f in self.fields],
        }


class EnumSchema(NamedSchema):
    """An enum schema."""

    def __init__(
        self, name: str, namespace: str, symbols: Iterable[str], default: str = ""
    ) -> None:
        super().__init__(name, namespace)
        symbols = list(symbols)
        if not symbols:
            raise SchemaError("enum must have a non-empty array of symbols")
        for symbol in symbols:
            try:
                validate_name(symbol)
            except SchemaError:
                raise SchemaError(f"invalid symbol {symbol}") from None
        self.symbols = symbols
        self.default = default

    @property
    def type(self) -> Type:
        return Type.ENUM

    def __str__(self) -> str:
        symbols = ",".join(f'"{s}"' for s in self.symbols)
        return f'{{"name":"{self.full_name}","type":"enum","symbols":[{symbols}]}}'

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.full_name,
            "type": "enum",
            "symbols": list(self.symbols),
        }
        if self.default:
            out["default"] = self.default
        return out