"""Resolution between Avro type names and Python types."""

from __future__ import annotations

import datetime
from fractions import Fraction
from typing import Any

from .base import LogicalType, SchemaError, Type


def _logical(typ: Type, logical: LogicalType) -> str:
    return f"{typ.value}.{logical.value}"


class TypeResolver:
    """Maps type names to Python types and back; primitives are pre-registered."""

    def __init__(self) -> None:
        self._types: dict[str, type] = {}
        self._names: dict[type, list[str]] = {}

        self.register(Type.NULL.value, type(None))
        self.register(Type.INT.value, int)
        self.register(Type.LONG.value, int)
        self.register(Type.FLOAT.value, float)
        self.register(Type.DOUBLE.value, float)
        self.register(Type.STRING.value, str)
        self.register(Type.BYTES.value, bytes)
        self.register(Type.BOOLEAN.value, bool)

        self.register(_logical(Type.INT, LogicalType.DATE), datetime.date)
        self.register(_logical(Type.INT, LogicalType.TIME_MILLIS), datetime.timedelta)
        self.register(_logical(Type.LONG, LogicalType.TIMESTAMP_MILLIS), datetime.datetime)
        self.register(_logical(Type.LONG, LogicalType.TIMESTAMP_MICROS), datetime.datetime)
        self.register(_logical(Type.LONG, LogicalType.TIME_MICROS), datetime.timedelta)
        self.register(_logical(Type.BYTES, LogicalType.DECIMAL), Fraction)

    def register(self, name: str, typ: Any) -> None:
        """Register a name for a type; an instance registers its own type."""
        kind = typ if isinstance(typ, type) else type(typ)
        self._types[name] = kind
        self._names.setdefault(kind, []).append(name)

    def name(self, typ: Any) -> list[str]:
        """Return the names registered for a type."""
        kind = typ if isinstance(typ, type) else type(typ)
        try:
            return list(self._names[kind])
        except KeyError:
            raise SchemaError(f"unable to resolve type {kind.__name__}") from None

    def type(self, name: str) -> type:
        """Return the type registered under a name."""
        try:
            return self._types[name]
        except KeyError:
            raise SchemaError(f"unable to resolve type with name {name}") from None