"""
Declaration node types for apidsl IR.

Nodes are created by the declaration DSL (``apidsl.dsl.design``) and are
mutated in place while the design is evaluated, so unlike most IR value
objects they are not frozen. Each node exclusively owns its metadata and
validation records.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .types import KIND_NAMES, PRIMITIVE_KINDS, TypeKind, primitive_accepts
from .validation import ValidationSpec

# Multi-valued key/value annotations, values kept in call order
MetaSpec = dict[str, list[str]]


class MetaOwnerMixin:
    """Lazy creation and accumulation of a node's ``meta`` record."""

    def ensure_meta(self) -> MetaSpec:
        if self.meta is None:
            self.meta = {}
        return self.meta

    def append_meta(self, key: str, *values: str) -> None:
        self.ensure_meta().setdefault(key, []).extend(values)


class DataType(BaseModel):
    """
    Built-in attribute type: a primitive, an array, a map or an object.

    Attributes:
        kind: Type kind
        elem: Element attribute (arrays) or value attribute (maps)
        key: Key attribute (maps)
        fields: Child attributes (objects), in declaration order
    """

    kind: TypeKind
    elem: AttributeSpec | None = None
    key: AttributeSpec | None = None
    fields: list[AttributeSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=False)

    @property
    def name(self) -> str:
        return KIND_NAMES[self.kind]

    def field(self, name: str) -> AttributeSpec | None:
        """Get object field by name."""
        for att in self.fields:
            if att.name == name:
                return att
        return None

    def is_compatible(self, value: Any) -> bool:
        """Check whether a literal value can be used as a value of this type."""
        if self.kind in PRIMITIVE_KINDS:
            return primitive_accepts(self.kind, value)
        if self.kind == TypeKind.ARRAY:
            if not isinstance(value, (list, tuple)):
                return False
            return self.elem is None or all(self.elem.is_compatible(v) for v in value)
        if self.kind == TypeKind.MAP:
            if not isinstance(value, dict):
                return False
            return all(
                (self.key is None or self.key.is_compatible(k))
                and (self.elem is None or self.elem.is_compatible(v))
                for k, v in value.items()
            )
        return isinstance(value, dict)


class AttributeSpec(MetaOwnerMixin, BaseModel):
    """
    An attribute: a payload, a result, an object field or the body of a type.

    ``type`` is ``None`` while the attribute's type is not known yet; in that
    state validations are recorded without type checks.
    """

    name: str | None = None
    type: DataType | UserTypeSpec | None = None
    description: str | None = None
    meta: MetaSpec | None = None
    validation: ValidationSpec | None = None

    model_config = ConfigDict(frozen=False)

    @property
    def kind(self) -> TypeKind | None:
        """Kind of the attribute type, ``None`` while unresolved."""
        if self.type is None:
            return None
        return self.type.kind

    def type_name(self) -> str:
        if self.type is None:
            return "<unresolved>"
        return self.type.name

    def is_compatible(self, value: Any) -> bool:
        if self.type is None:
            return True
        return self.type.is_compatible(value)

    def ensure_validation(self) -> ValidationSpec:
        if self.validation is None:
            self.validation = ValidationSpec()
        return self.validation

    def eval_name(self) -> str:
        if self.name:
            return f"attribute '{self.name}'"
        return "attribute"


class UserTypeSpec(BaseModel):
    """
    A named type wrapping an attribute.

    Used as an attribute type, it takes on the kind of its wrapped
    attribute. Metadata set inside its declaration lands on that attribute.
    """

    name: str
    attribute: AttributeSpec = Field(default_factory=AttributeSpec)

    model_config = ConfigDict(frozen=False)

    @property
    def kind(self) -> TypeKind | None:
        return self.attribute.kind

    def is_compatible(self, value: Any) -> bool:
        return self.attribute.is_compatible(value)

    def eval_name(self) -> str:
        return f"type '{self.name}'"


class ResultTypeSpec(MetaOwnerMixin, UserTypeSpec):
    """
    A user type identified by a media type, used to describe method results.

    Unlike plain user types, result types carry their own metadata record.
    """

    identifier: str
    meta: MetaSpec | None = None

    def eval_name(self) -> str:
        return f"result type '{self.identifier}'"


class MethodSpec(MetaOwnerMixin, BaseModel):
    """A service method with optional payload and result attributes."""

    name: str
    description: str | None = None
    payload: AttributeSpec | None = None
    result: AttributeSpec | None = None
    meta: MetaSpec | None = None

    model_config = ConfigDict(frozen=False)

    def eval_name(self) -> str:
        return f"method '{self.name}'"


class ServiceSpec(MetaOwnerMixin, BaseModel):
    """A service grouping methods."""

    name: str
    description: str | None = None
    methods: list[MethodSpec] = Field(default_factory=list)
    meta: MetaSpec | None = None

    model_config = ConfigDict(frozen=False)

    def get_method(self, name: str) -> MethodSpec | None:
        """Get method by name."""
        for m in self.methods:
            if m.name == name:
                return m
        return None

    def eval_name(self) -> str:
        return f"service '{self.name}'"


class APISpec(MetaOwnerMixin, BaseModel):
    """The API definition: global properties of the design."""

    name: str
    title: str | None = None
    description: str | None = None
    meta: MetaSpec | None = None

    model_config = ConfigDict(frozen=False)

    def eval_name(self) -> str:
        return f"API '{self.name}'"


class DesignSpec(BaseModel):
    """
    Root container of an evaluated design.

    Owned by the evaluation context; top-level declarations are appended
    as they are evaluated.
    """

    api: APISpec | None = None
    services: list[ServiceSpec] = Field(default_factory=list)
    types: list[UserTypeSpec] = Field(default_factory=list)
    result_types: list[ResultTypeSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=False)

    def get_service(self, name: str) -> ServiceSpec | None:
        """Get service by name."""
        for s in self.services:
            if s.name == name:
                return s
        return None

    def get_type(self, name: str) -> UserTypeSpec | None:
        """Get user or result type by name."""
        for t in (*self.types, *self.result_types):
            if t.name == name:
                return t
        return None


DataType.model_rebuild()
AttributeSpec.model_rebuild()
UserTypeSpec.model_rebuild()
ResultTypeSpec.model_rebuild()
MethodSpec.model_rebuild()
ServiceSpec.model_rebuild()
DesignSpec.model_rebuild()


# =============================================================================
# Built-in types
# =============================================================================

BOOLEAN = DataType(kind=TypeKind.BOOLEAN)
INT = DataType(kind=TypeKind.INT)
INT32 = DataType(kind=TypeKind.INT32)
INT64 = DataType(kind=TypeKind.INT64)
UINT = DataType(kind=TypeKind.UINT)
UINT32 = DataType(kind=TypeKind.UINT32)
UINT64 = DataType(kind=TypeKind.UINT64)
FLOAT32 = DataType(kind=TypeKind.FLOAT32)
FLOAT64 = DataType(kind=TypeKind.FLOAT64)
STRING = DataType(kind=TypeKind.STRING)
BYTES = DataType(kind=TypeKind.BYTES)
ANY = DataType(kind=TypeKind.ANY)


def array_of(elem: DataType | UserTypeSpec) -> DataType:
    """Build an array type with the given element type."""
    return DataType(kind=TypeKind.ARRAY, elem=AttributeSpec(type=elem))


def map_of(key: DataType | UserTypeSpec, elem: DataType | UserTypeSpec) -> DataType:
    """Build a map type with the given key and value types."""
    return DataType(kind=TypeKind.MAP, key=AttributeSpec(type=key), elem=AttributeSpec(type=elem))


def object_type() -> DataType:
    """Build a new, empty object type."""
    return DataType(kind=TypeKind.OBJECT)
