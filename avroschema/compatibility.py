"""Reader/writer schema compatibility checking."""

from __future__ import annotations

from typing import Iterable

from .base import (
    ArraySchema,
    FixedSchema,
    MapSchema,
    NamedSchema,
    RefSchema,
    Schema,
    SchemaError,
    Type,
    UnionSchema,
)
from .named import EnumSchema, Field, RecordSchema


class IncompatibleSchemaError(SchemaError):
    """Raised when a reader schema cannot read data written with a writer schema."""


_IN_PROGRESS = object()

_PROMOTIONS: dict[Type, frozenset[Type]] = {
    Type.INT: frozenset({Type.LONG, Type.FLOAT, Type.DOUBLE}),
    Type.LONG: frozenset({Type.FLOAT, Type.DOUBLE}),
    Type.FLOAT: frozenset({Type.DOUBLE}),
    Type.STRING: frozenset({Type.BYTES}),
    Type.BYTES: frozenset({Type.STRING}),
}


class SchemaCompatibility:
    """Determines the compatibility of reader and writer schemas.

    Results are cached by schema fingerprints, which also breaks recursion
    through self-referencing schemas.
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[bytes, bytes], object] = {}

    def compatible(self, reader: Schema, writer: Schema) -> None:
        """Raise IncompatibleSchemaError unless the reader can read the writer's data."""
        self._compatible(reader, writer)

    def _compatible(self, reader: Schema, writer: Schema) -> None:
        key = (reader.fingerprint(), writer.fingerprint())
        if key in self._cache:
            cached = self._cache[key]
            if cached is _IN_PROGRESS or cached is None:
                return
            raise IncompatibleSchemaError(cached)

        self._cache[key] = _IN_PROGRESS
        try:
            self._match(reader, writer)
        except IncompatibleSchemaError as err:
            message = str(err)
            self._cache[key] = message
            raise IncompatibleSchemaError(message) from None
        self._cache[key] = None

    def _match(self, reader: Schema, writer: Schema) -> None:
        if isinstance(reader, RefSchema):
            reader = reader.schema
        if isinstance(writer, RefSchema):
            writer = writer.schema

        if reader.type is not writer.type:
            if isinstance(writer, UnionSchema):
                for schema in writer.types:
                    self._compatible(reader, schema)
                return

            if isinstance(reader, UnionSchema):
                for schema in reader.types:
                    try:
                        self._compatible(schema, writer)
                    except IncompatibleSchemaError:
                        continue
                    return
                raise IncompatibleSchemaError(
                    f"reader union lacking writer schema {writer.type.value}"
                )

            if reader.type in _PROMOTIONS.get(writer.type, frozenset()):
                return

            raise IncompatibleSchemaError(
                f"reader schema {reader.type.value} not compatible "
                f"with writer schema {writer.type.value}"
            )

        if isinstance(reader, ArraySchema) and isinstance(writer, ArraySchema):
            self._compatible(reader.items, writer.items)
        elif isinstance(reader, MapSchema) and isinstance(writer, MapSchema):
            self._compatible(reader.values, writer.values)
        elif isinstance(reader, FixedSchema) and isinstance(writer, FixedSchema):
            _check_name(reader, writer)
            if reader.size != writer.size:
                raise IncompatibleSchemaError(
                    f"{reader.full_name} reader and writer fixed sizes do not match"
                )
        elif isinstance(reader, EnumSchema) and isinstance(writer, EnumSchema):
            _check_name(reader, writer)
            for symbol in writer.symbols:
                if symbol not in reader.symbols:
                    raise IncompatibleSchemaError(
                        f"reader {reader.full_name} is missing symbol {symbol}"
                    )
        elif isinstance(reader, RecordSchema) and isinstance(writer, RecordSchema):
            _check_name(reader, writer)
            self._check_fields(reader, writer)
        elif isinstance(writer, UnionSchema):
            for schema in writer.types:
                self._compatible(reader, schema)

    def _check_fields(self, reader: RecordSchema, writer: RecordSchema) -> None:
        for field in reader.fields:
            found = _find_field(writer.fields, field.name)
            if found is None:
                if field.has_default:
                    continue
                raise IncompatibleSchemaError(
                    f"reader field {field.name} is missing in writer schema and has no default"
                )
            self._compatible(field.type, found.type)


def _check_name(reader: NamedSchema, writer: NamedSchema) -> None:
    if reader.full_name != writer.full_name:
        raise IncompatibleSchemaError(
            f"reader schema {reader.full_name} and writer schema "
            f"{writer.full_name} names do not match"
        )


def _find_field(fields: Iterable[Field], name: str) -> Field | None:
    return next((f for f in fields if f.name == name), None)