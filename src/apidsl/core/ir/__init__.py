"""
apidsl Intermediate Representation (IR) types.

Types are organized into submodules and re-exported from this package.
"""

# Declaration nodes and built-in types
from .nodes import (
    ANY,
    BOOLEAN,
    BYTES,
    FLOAT32,
    FLOAT64,
    INT,
    INT32,
    INT64,
    STRING,
    UINT,
    UINT32,
    UINT64,
    APISpec,
    AttributeSpec,
    DataType,
    DesignSpec,
    MetaSpec,
    MethodSpec,
    ResultTypeSpec,
    ServiceSpec,
    UserTypeSpec,
    array_of,
    map_of,
    object_type,
)

# Type kinds
from .types import (
    FLOAT_KINDS,
    INTEGER_KINDS,
    LENGTH_KINDS,
    NUMERIC_KINDS,
    TypeKind,
)

# Validations
from .validation import (
    ValidationFormat,
    ValidationSpec,
)

__all__ = [
    # Nodes
    "APISpec",
    "AttributeSpec",
    "DataType",
    "DesignSpec",
    "MetaSpec",
    "MethodSpec",
    "ResultTypeSpec",
    "ServiceSpec",
    "UserTypeSpec",
    # Built-in types
    "ANY",
    "BOOLEAN",
    "BYTES",
    "FLOAT32",
    "FLOAT64",
    "INT",
    "INT32",
    "INT64",
    "STRING",
    "UINT",
    "UINT32",
    "UINT64",
    "array_of",
    "map_of",
    "object_type",
    # Kinds
    "TypeKind",
    "INTEGER_KINDS",
    "FLOAT_KINDS",
    "NUMERIC_KINDS",
    "LENGTH_KINDS",
    # Validations
    "ValidationFormat",
    "ValidationSpec",
]
