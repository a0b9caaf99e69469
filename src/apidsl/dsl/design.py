"""
Declaration DSL.

Builds the declaration tree that the validation and metadata DSL annotate.
Every builder creates a node, attaches it to its parent and then runs the
optional body with the new node as the current target:

    def calc(ctx):
        def add(ctx):
            def operands(ctx):
                attribute(ctx, "a", INT, fn=lambda ctx: minimum(ctx, 0))
                attribute(ctx, "b", INT)
                required(ctx, "a", "b")

            payload(ctx, fn=operands)
            result(ctx, INT)

        method(ctx, "add", add)

    service(ctx, "calc", calc)

Builders used in the wrong place report an incompatible-target error and
return ``None``.
"""

from __future__ import annotations

import logging
import re

from ..core.errors import ErrorKind
from ..core.eval import DSLBody, EvalContext, TargetKind
from ..core.ir import (
    STRING,
    APISpec,
    AttributeSpec,
    DataType,
    MethodSpec,
    ResultTypeSpec,
    ServiceSpec,
    TypeKind,
    UserTypeSpec,
    object_type,
)

logger = logging.getLogger(__name__)

AttributeType = DataType | UserTypeSpec


def api(ctx: EvalContext, name: str, fn: DSLBody | None = None) -> APISpec | None:
    """Define the API. Top level only, at most once per design."""
    if ctx.current().kind != TargetKind.NONE:
        ctx.incompatible_dsl("api")
        return None
    if ctx.design.api is not None:
        ctx.report_error(
            ErrorKind.INVALID_VALUE,
            f"API {name!r} conflicts with API {ctx.design.api.name!r} defined earlier",
        )
        return None

    node = APISpec(name=name)
    ctx.design.api = node
    logger.debug("Declared %s", node.eval_name())
    ctx.execute(fn, node)
    return node


def service(ctx: EvalContext, name: str, fn: DSLBody | None = None) -> ServiceSpec | None:
    """Define a service. Top level only."""
    if ctx.current().kind != TargetKind.NONE:
        ctx.incompatible_dsl("service")
        return None
    if ctx.design.get_service(name) is not None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"service {name!r} is defined twice")
        return None

    node = ServiceSpec(name=name)
    ctx.design.services.append(node)
    logger.debug("Declared %s", node.eval_name())
    ctx.execute(fn, node)
    return node


def method(ctx: EvalContext, name: str, fn: DSLBody | None = None) -> MethodSpec | None:
    """Define a method of the current service."""
    target = ctx.current()
    if target.kind != TargetKind.SERVICE:
        ctx.incompatible_dsl("method")
        return None
    svc = target.node
    assert isinstance(svc, ServiceSpec)
    if svc.get_method(name) is not None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"method {name!r} is defined twice")
        return None

    node = MethodSpec(name=name)
    svc.methods.append(node)
    logger.debug("Declared %s", node.eval_name())
    ctx.execute(fn, node)
    return node


def payload(
    ctx: EvalContext, type: AttributeType | None = None, fn: DSLBody | None = None
) -> AttributeSpec | None:
    """Define the payload of the current method."""
    return _method_attribute(ctx, "payload", type, fn)


def result(
    ctx: EvalContext, type: AttributeType | None = None, fn: DSLBody | None = None
) -> AttributeSpec | None:
    """Define the result of the current method."""
    return _method_attribute(ctx, "result", type, fn)


def user_type(
    ctx: EvalContext,
    name: str,
    type: AttributeType | None = None,
    fn: DSLBody | None = None,
) -> UserTypeSpec | None:
    """
    Define a named type. Top level only.

    Without an explicit type the user type is an object.
    """
    if ctx.current().kind != TargetKind.NONE:
        ctx.incompatible_dsl("user_type")
        return None
    if ctx.design.get_type(name) is not None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"type {name!r} is defined twice")
        return None

    node = UserTypeSpec(name=name, attribute=AttributeSpec(type=type or object_type()))
    ctx.design.types.append(node)
    logger.debug("Declared %s", node.eval_name())
    ctx.execute(fn, node)
    return node


def result_type(
    ctx: EvalContext,
    identifier: str,
    fn: DSLBody | None = None,
    name: str | None = None,
) -> ResultTypeSpec | None:
    """
    Define a result type identified by a media type. Top level only.

    The type name defaults to the camel-cased last segment of the
    identifier, e.g. "Bottle" for "application/vnd.cellar.bottle".
    """
    if ctx.current().kind != TargetKind.NONE:
        ctx.incompatible_dsl("result_type")
        return None

    identifier = identifier.split(";", 1)[0].strip()
    type_name = name or _type_name_from_identifier(identifier)
    if "/" not in identifier or not type_name:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"invalid result type identifier {identifier!r}")
        return None
    if ctx.design.get_type(type_name) is not None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"type {type_name!r} is defined twice")
        return None

    node = ResultTypeSpec(
        identifier=identifier,
        name=type_name,
        attribute=AttributeSpec(type=object_type()),
    )
    ctx.design.result_types.append(node)
    logger.debug("Declared %s", node.eval_name())
    ctx.execute(fn, node)
    return node


def attribute(
    ctx: EvalContext,
    name: str,
    type: AttributeType | None = None,
    description: str | None = None,
    fn: DSLBody | None = None,
) -> AttributeSpec | None:
    """
    Define a field of the current object attribute.

    An unresolved parent becomes an object. Without an explicit type the
    attribute stays unresolved while its body runs, and ends up an object
    if the body declared fields or a string otherwise.

    Settling the type does not re-check validations recorded while it was
    unresolved.
    """
    parent = ctx.current().attribute
    if parent is None:
        ctx.incompatible_dsl("attribute")
        return None

    if parent.type is None:
        parent.type = object_type()
    obj = parent.type
    if not isinstance(obj, DataType) or obj.kind != TypeKind.OBJECT:
        ctx.report_error(
            ErrorKind.INCOMPATIBLE_TYPE,
            f"cannot define attribute {name!r}: parent must be an inline object "
            f"(but type is {parent.type_name()})",
        )
        return None
    if obj.field(name) is not None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"attribute {name!r} is defined twice")
        return None

    att = AttributeSpec(name=name, type=type, description=description)
    obj.fields.append(att)
    ctx.execute(fn, att)
    if att.type is None:
        att.type = STRING
    return att


def description(ctx: EvalContext, text: str) -> None:
    """Set the description of the current declaration."""
    target = ctx.current()
    if target.kind == TargetKind.NONE:
        ctx.incompatible_dsl("description")
        return

    node = target.attribute or target.node
    node.description = text


def _method_attribute(
    ctx: EvalContext,
    dsl_name: str,
    type: AttributeType | None,
    fn: DSLBody | None,
) -> AttributeSpec | None:
    target = ctx.current()
    if target.kind != TargetKind.METHOD:
        ctx.incompatible_dsl(dsl_name)
        return None
    if type is None and fn is None:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"{dsl_name} requires a type or a body")
        return None

    m = target.node
    assert isinstance(m, MethodSpec)
    att = AttributeSpec(type=type)
    setattr(m, dsl_name, att)
    ctx.execute(fn, att)
    if att.type is None:
        att.type = object_type()
    return att


def _type_name_from_identifier(identifier: str) -> str:
    last = re.split(r"[./+]", identifier)[-1]
    return "".join(part.capitalize() for part in re.split(r"[^0-9A-Za-z]+", last) if part)
