"""
Type kinds for apidsl IR.

A kind is the coarse classification of an attribute type that validations
are checked against. Kind groups below are the allowed sets used by the
validation DSL.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class TypeKind(StrEnum):
    """Enumeration of attribute type kinds."""

    BOOLEAN = "boolean"
    INT = "int"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    BYTES = "bytes"
    ANY = "any"
    ARRAY = "array"
    MAP = "map"
    OBJECT = "object"


INTEGER_KINDS = frozenset(
    {
        TypeKind.INT,
        TypeKind.INT32,
        TypeKind.INT64,
        TypeKind.UINT,
        TypeKind.UINT32,
        TypeKind.UINT64,
    }
)
FLOAT_KINDS = frozenset({TypeKind.FLOAT32, TypeKind.FLOAT64})
NUMERIC_KINDS = INTEGER_KINDS | FLOAT_KINDS
LENGTH_KINDS = frozenset({TypeKind.BYTES, TypeKind.STRING, TypeKind.ARRAY, TypeKind.MAP})
PRIMITIVE_KINDS = NUMERIC_KINDS | {
    TypeKind.BOOLEAN,
    TypeKind.STRING,
    TypeKind.BYTES,
    TypeKind.ANY,
}

# Display names used in error messages
KIND_NAMES: dict[TypeKind, str] = {
    TypeKind.BOOLEAN: "Boolean",
    TypeKind.INT: "Int",
    TypeKind.INT32: "Int32",
    TypeKind.INT64: "Int64",
    TypeKind.UINT: "UInt",
    TypeKind.UINT32: "UInt32",
    TypeKind.UINT64: "UInt64",
    TypeKind.FLOAT32: "Float32",
    TypeKind.FLOAT64: "Float64",
    TypeKind.STRING: "String",
    TypeKind.BYTES: "Bytes",
    TypeKind.ANY: "Any",
    TypeKind.ARRAY: "array",
    TypeKind.MAP: "map",
    TypeKind.OBJECT: "object",
}


def primitive_accepts(kind: TypeKind, value: Any) -> bool:
    """Check whether a literal value can be represented by a primitive kind.

    Integers are accepted by floating kinds, strings by bytes; ``bool`` is
    only ever a boolean even though it subclasses ``int``.
    """
    if kind == TypeKind.ANY:
        return True
    if isinstance(value, bool):
        return kind == TypeKind.BOOLEAN
    if isinstance(value, int):
        return kind in NUMERIC_KINDS
    if isinstance(value, float):
        return kind in FLOAT_KINDS
    if isinstance(value, str):
        return kind in (TypeKind.STRING, TypeKind.BYTES)
    if isinstance(value, (bytes, bytearray)):
        return kind == TypeKind.BYTES
    return False
