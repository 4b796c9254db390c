"""Core schema model: schema types, primitive and container schemas, fingerprints."""

from __future__ import annotations

import hashlib
import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable


class SchemaError(ValueError):
    """Raised when a schema is invalid or cannot be handled."""


class Type(str, Enum):
    """An Avro schema type."""

    RECORD = "record"
    ERROR = "error"
    REF = "<ref>"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    UNION = "union"
    FIXED = "fixed"
    STRING = "string"
    BYTES = "bytes"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    NULL = "null"


class LogicalType(str, Enum):
    """An Avro logical type."""

    DECIMAL = "decimal"
    UUID = "uuid"
    DATE = "date"
    TIME_MILLIS = "time-millis"
    TIME_MICROS = "time-micros"
    TIMESTAMP_MILLIS = "timestamp-millis"
    TIMESTAMP_MICROS = "timestamp-micros"
    DURATION = "duration"


class FingerprintType(str, Enum):
    """A schema fingerprinting algorithm."""

    CRC64_AVRO = "CRC64-AVRO"
    MD5 = "MD5"
    SHA256 = "SHA256"


SCHEMA_RESERVED = frozenset(
    {
        "doc", "fields", "items", "name", "namespace", "size", "symbols",
        "values", "type", "aliases", "logicalType", "precision", "scale",
    }
)
FIELD_RESERVED = frozenset({"default", "doc", "name", "order", "type", "aliases"})

_CRC64_EMPTY = 0xC15D213AA4D7A795


def _build_crc64_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        fp = i
        for _ in range(8):
            fp = (fp >> 1) ^ (_CRC64_EMPTY & -(fp & 1))
        table.append(fp)
    return tuple(table)


_CRC64_TABLE = _build_crc64_table()


def crc64_avro(data: bytes) -> int:
    """Return the 64-bit Avro Rabin fingerprint of the data."""
    fp = _CRC64_EMPTY
    for byte in data:
        fp = (fp >> 8) ^ _CRC64_TABLE[(fp ^ byte) & 0xFF]
    return fp


_FINGERPRINTERS: dict[FingerprintType, Callable[[bytes], bytes]] = {
    FingerprintType.CRC64_AVRO: lambda data: crc64_avro(data).to_bytes(8, "big"),
    FingerprintType.MD5: lambda data: hashlib.md5(data).digest(),
    FingerprintType.SHA256: lambda data: hashlib.sha256(data).digest(),
}

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def validate_name(name: str) -> None:
    """Raise SchemaError unless the name is a valid Avro name."""
    if not name:
        raise SchemaError("name must be a non-empty")
    if not _NAME_RE.fullmatch(name):
        raise SchemaError(f"invalid name {name}")


def _new_name(name: str, namespace: str) -> tuple[str, str, str]:
    space, dot, short = name.rpartition(".")
    if dot:
        name, namespace = short, space
    full = f"{namespace}.{name}" if namespace else name
    for part in full.split("."):
        validate_name(part)
    return name, namespace, full


class SchemaCache:
    """A name-keyed cache of schemas."""

    def __init__(self) -> None:
        self._cache: dict[str, Schema] = {}

    def add(self, name: str, schema: Schema) -> None:
        """Store the schema under the given name."""
        self._cache[name] = schema

    def get(self, name: str) -> Schema | None:
        """Return the schema with the given name, or None."""
        return self._cache.get(name)


class Schema(ABC):
    """An Avro schema. ``str()`` gives its canonical form."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._fingerprints: dict[FingerprintType, bytes] = {}

    @property
    @abstractmethod
    def type(self) -> Type:
        """The type of the schema."""

    @abstractmethod
    def __str__(self) -> str: ...

    @abstractmethod
    def to_json(self) -> Any:
        """Return the schema as a JSON-compatible value."""

    def fingerprint(self) -> bytes:
        """Return the SHA256 fingerprint of the canonical form."""
        return self.fingerprint_using(FingerprintType.SHA256)

    def fingerprint_using(self, typ: FingerprintType | str) -> bytes:
        """Return the fingerprint of the canonical form using the given algorithm."""
        try:
            kind = FingerprintType(typ)
        except ValueError:
            raise SchemaError(f"unknown fingerprint algorithm {typ}") from None
        cached = self._fingerprints.get(kind)
        if cached is None:
            cached = _FINGERPRINTERS[kind](str(self).encode("utf-8"))
            self._fingerprints[kind] = cached
        return cached

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class Properties:
    """Custom, non-reserved properties attached to a schema or field."""

    reserved: frozenset[str] = SCHEMA_RESERVED

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._props: dict[str, Any] = {}

    def add_prop(self, name: str, value: Any) -> None:
        """Add a property; reserved names and existing properties are left alone."""
        if name in self.reserved:
            return
        self._props.setdefault(name, value)

    def prop(self, name: str) -> Any:
        """Return the property value, or None."""
        return self._props.get(name)


class NamedSchema(Properties, Schema):
    """A schema that carries a name and namespace."""

    def __init__(self, name: str, namespace: str = "") -> None:
        super().__init__()
        self.name, self.namespace, self.full_name = _new_name(name, namespace)


@dataclass(frozen=True)
class PrimitiveLogicalSchema:
    """A logical type without extra properties."""

    type: LogicalType

    def __str__(self) -> str:
        return f'"logicalType":"{self.type.value}"'


@dataclass(frozen=True)
class DecimalLogicalSchema:
    """The decimal logical type."""

    precision: int
    scale: int = 0

    @property
    def type(self) -> LogicalType:
        return LogicalType.DECIMAL

    def __str__(self) -> str:
        scale = f',"scale":{self.scale}' if self.scale > 0 else ""
        return f'"logicalType":"decimal","precision":{self.precision}{scale}'


LogicalSchema = PrimitiveLogicalSchema | DecimalLogicalSchema


class PrimitiveSchema(Schema):
    """A primitive type schema, optionally with a logical type."""

    def __init__(self, typ: Type, logical: LogicalSchema | None = None) -> None:
        super().__init__()
        self._type = Type(typ)
        self.logical = logical

    @property
    def type(self) -> Type:
        return self._type

    def __str__(self) -> str:
        if self.logical is None:
            return f'"{self._type.value}"'
        return f'{{"type":"{self._type.value}",{self.logical}}}'

    def to_json(self) -> Any:
        return json.loads(str(self))


class NullSchema(Schema):
    """The null schema."""

    @property
    def type(self) -> Type:
        return Type.NULL

    def __str__(self) -> str:
        return '"null"'

    def to_json(self) -> Any:
        return "null"


class ArraySchema(Properties, Schema):
    """An array schema."""

    def __init__(self, items: Schema) -> None:
        super().__init__()
        self.items = items

    @property
    def type(self) -> Type:
        return Type.ARRAY

    def __str__(self) -> str:
        return f'{{"type":"array","items":{self.items}}}'

    def to_json(self) -> Any:
        return {"type": "array", "items": self.items.to_json()}


class MapSchema(Properties, Schema):
    """A map schema."""

    def __init__(self, values: Schema) -> None:
        super().__init__()
        self.values = values

    @property
    def type(self) -> Type:
        return Type.MAP

    def __str__(self) -> str:
        return f'{{"type":"map","values":{self.values}}}'

    def to_json(self) -> Any:
        return {"type": "map", "values": self.values.to_json()}


class UnionSchema(Schema):
    """A union schema."""

    def __init__(self, types: Iterable[Schema]) -> None:
        super().__init__()
        types = list(types)
        seen: set[str] = set()
        for schema in types:
            if schema.type is Type.UNION:
                raise SchemaError("union type cannot be a union")
            name = schema_type_name(schema)
            if name in seen:
                raise SchemaError("union type must be unique")
            seen.add(name)
        self.types = types

    @property
    def type(self) -> Type:
        return Type.UNION

    def get(self, name: str) -> tuple[Schema | None, int]:
        """Return the member schema with the given type name and its position, or (None, -1)."""
        for index, schema in enumerate(self.types):
            if schema_type_name(schema) == name:
                return schema, index
        return None, -1

    def nullable(self) -> bool:
        """Whether the union is exactly a null and one other type."""
        return len(self.types) == 2 and any(t.type is Type.NULL for t in self.types)

    def indices(self) -> tuple[int, int]:
        """Return the (null, type) positions of a nullable union, else (0, 0)."""
        if not self.nullable():
            return 0, 0
        if self.types[0].type is Type.NULL:
            return 0, 1
        return 1, 0

    def __str__(self) -> str:
        return "[" + ",".join(str(t) for t in self.types) + "]"

    def to_json(self) -> Any:
        return [t.to_json() for t in self.types]


class FixedSchema(NamedSchema):
    """A fixed-size schema, optionally with a logical type."""

    def __init__(
        self, name: str, namespace: str, size: int, logical: LogicalSchema | None = None
    ) -> None:
        super().__init__(name, namespace)
        self.size = size
        self.logical = logical

    @property
    def type(self) -> Type:
        return Type.FIXED

    def __str__(self) -> str:
        logical = f",{self.logical}" if self.logical is not None else ""
        return f'{{"name":"{self.full_name}","type":"fixed","size":{self.size}{logical}}}'

    def to_json(self) -> Any:
        return json.loads(str(self))


class RefSchema(Schema):
    """A reference to a named schema."""

    def __init__(self, schema: NamedSchema) -> None:
        super().__init__()
        self.schema = schema

    @property
    def type(self) -> Type:
        return Type.REF

    def __str__(self) -> str:
        return f'"{self.schema.full_name}"'

    def to_json(self) -> Any:
        return self.schema.full_name

    def fingerprint_using(self, typ: FingerprintType | str) -> bytes:
        return self.schema.fingerprint_using(typ)


def schema_type_name(schema: Schema) -> str:
    """Return the full name of a named schema, or its type (and logical type)."""
    if isinstance(schema, RefSchema):
        schema = schema.schema
    if isinstance(schema, NamedSchema):
        return schema.full_name
    name = schema.type.value
    logical = getattr(schema, "logical", None)
    if logical is not None:
        name += "." + logical.type.value
    return name