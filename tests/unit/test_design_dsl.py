"""Tests for the declaration DSL."""

from apidsl.core import ir
from apidsl.core.errors import ErrorKind
from apidsl.core.eval import EvalContext
from apidsl.dsl import (
    api,
    attribute,
    description,
    maximum,
    meta,
    method,
    min_length,
    minimum,
    payload,
    required,
    result,
    result_type,
    service,
    user_type,
)


class TestApi:
    def test_declares_api(self, ctx: EvalContext) -> None:
        node = api(ctx, "cellar", lambda c: description(c, "The wine cellar"))

        assert ctx.design.api is node
        assert node.description == "The wine cellar"

    def test_only_once(self, ctx: EvalContext) -> None:
        api(ctx, "first")
        assert api(ctx, "second") is None

        assert ctx.design.api.name == "first"
        assert "conflicts" in ctx.errors.errors[0].message

    def test_not_nested(self, ctx: EvalContext) -> None:
        service(ctx, "s", lambda c: api(c, "inner"))

        assert ctx.design.api is None
        assert ctx.errors.errors[0].kind == ErrorKind.INCOMPATIBLE_TARGET


class TestServiceAndMethod:
    def test_service_with_methods(self, ctx: EvalContext) -> None:
        def body(c):
            method(c, "add")
            method(c, "sub")

        svc = service(ctx, "calc", body)

        assert ctx.design.services == [svc]
        assert [m.name for m in svc.methods] == ["add", "sub"]

    def test_duplicate_service(self, ctx: EvalContext) -> None:
        service(ctx, "calc")
        assert service(ctx, "calc") is None
        assert len(ctx.design.services) == 1

    def test_duplicate_method(self, ctx: EvalContext) -> None:
        def body(c):
            method(c, "add")
            method(c, "add")

        svc = service(ctx, "calc", body)

        assert len(svc.methods) == 1
        assert "defined twice" in ctx.errors.errors[0].message

    def test_method_outside_service(self, ctx: EvalContext) -> None:
        assert method(ctx, "add") is None
        assert ctx.errors.errors[0].message == "invalid use of method outside of any declaration"

    def test_method_metadata(self, ctx: EvalContext) -> None:
        def body(c):
            method(c, "add", lambda c: meta(c, "swagger:summary", "Add"))

        svc = service(ctx, "calc", body)

        assert svc.methods[0].meta == {"swagger:summary": ["Add"]}


class TestPayloadAndResult:
    def test_explicit_types(self, ctx: EvalContext) -> None:
        def add(c):
            payload(c, ir.array_of(ir.INT))
            result(c, ir.INT)

        svc = service(ctx, "calc", lambda c: method(c, "add", add))
        m = svc.methods[0]

        assert m.payload.kind == ir.TypeKind.ARRAY
        assert m.result.type is ir.INT

    def test_body_defaults_to_object(self, ctx: EvalContext) -> None:
        def operands(c):
            attribute(c, "a", ir.INT, fn=lambda c: minimum(c, 0))
            attribute(c, "b", ir.INT)
            required(c, "a", "b")

        svc = service(ctx, "calc", lambda c: method(c, "add", lambda c: payload(c, fn=operands)))
        p = svc.methods[0].payload

        assert p.kind == ir.TypeKind.OBJECT
        assert [f.name for f in p.type.fields] == ["a", "b"]
        assert p.type.field("a").validation.minimum == 0.0
        assert p.validation.required == ["a", "b"]
        assert not ctx.errors

    def test_requires_type_or_body(self, ctx: EvalContext) -> None:
        service(ctx, "calc", lambda c: method(c, "add", lambda c: result(c)))

        assert "requires a type or a body" in ctx.errors.errors[0].message

    def test_outside_method(self, ctx: EvalContext) -> None:
        service(ctx, "calc", lambda c: payload(c, ir.INT))

        err = ctx.errors.errors[0]
        assert err.kind == ErrorKind.INCOMPATIBLE_TARGET
        assert err.target == "service 'calc'"


class TestUserType:
    def test_defaults_to_object(self, ctx: EvalContext) -> None:
        def body(c):
            attribute(c, "id", ir.INT)
            required(c, "id")

        t = user_type(ctx, "Account", fn=body)

        assert ctx.design.types == [t]
        assert t.kind == ir.TypeKind.OBJECT
        assert t.attribute.validation.required == ["id"]

    def test_explicit_type(self, ctx: EvalContext) -> None:
        t = user_type(ctx, "Codes", ir.array_of(ir.STRING))
        assert t.kind == ir.TypeKind.ARRAY

    def test_duplicate(self, ctx: EvalContext) -> None:
        user_type(ctx, "Account")
        assert user_type(ctx, "Account") is None
        assert len(ctx.design.types) == 1

    def test_usable_as_attribute_type(self, ctx: EvalContext) -> None:
        code = user_type(ctx, "Code", ir.STRING)
        owner = user_type(ctx, "Owner", fn=lambda c: attribute(c, "code", code))

        field = owner.attribute.type.field("code")
        assert field.type is code
        assert field.kind == ir.TypeKind.STRING


class TestResultType:
    def test_name_from_identifier(self, ctx: EvalContext) -> None:
        rt = result_type(ctx, "application/vnd.cellar.bottle")

        assert rt.name == "Bottle"
        assert rt.identifier == "application/vnd.cellar.bottle"
        assert ctx.design.result_types == [rt]

    def test_parameters_stripped(self, ctx: EvalContext) -> None:
        rt = result_type(ctx, "application/vnd.cellar.error; type=collection")

        assert rt.identifier == "application/vnd.cellar.error"
        assert rt.name == "Error"

    def test_explicit_name(self, ctx: EvalContext) -> None:
        rt = result_type(ctx, "application/json", name="Payload")
        assert rt.name == "Payload"

    def test_invalid_identifier(self, ctx: EvalContext) -> None:
        assert result_type(ctx, "bottle") is None
        assert "invalid result type identifier" in ctx.errors.errors[0].message

    def test_body(self, ctx: EvalContext) -> None:
        def body(c):
            attribute(c, "message", ir.STRING, fn=lambda c: meta(c, "struct:error:name"))
            required(c, "message")
            meta(c, "type:generate:force")

        rt = result_type(ctx, "application/vnd.cellar.error", body)

        assert rt.meta == {"type:generate:force": []}
        assert rt.attribute.validation.required == ["message"]
        assert rt.attribute.type.field("message").meta == {"struct:error:name": []}


class TestAttribute:
    def test_defaults_to_string(self, ctx: EvalContext) -> None:
        t = user_type(ctx, "Account", fn=lambda c: attribute(c, "name"))
        assert t.attribute.type.field("name").type is ir.STRING

    def test_nested_fields_make_an_object(self, ctx: EvalContext) -> None:
        def address(c):
            attribute(c, "city")
            required(c, "city")

        t = user_type(ctx, "Account", fn=lambda c: attribute(c, "address", fn=address))
        addr = t.attribute.type.field("address")

        assert addr.kind == ir.TypeKind.OBJECT
        assert addr.type.field("city").type is ir.STRING
        assert addr.validation.required == ["city"]

    def test_untyped_body_records_validations(self, ctx: EvalContext) -> None:
        def body(c):
            min_length(c, 1)
            maximum(c, 10)

        t = user_type(ctx, "T", fn=lambda c: attribute(c, "v", fn=body))
        v = t.attribute.type.field("v")

        assert v.validation.min_length == 1
        assert v.validation.maximum == 10.0
        assert v.type is ir.STRING
        assert not ctx.errors

    def test_settled_type_keeps_recorded_bounds(self, ctx: EvalContext) -> None:
        t = user_type(ctx, "T", fn=lambda c: attribute(c, "v", fn=lambda a: minimum(a, 3)))
        v = t.attribute.type.field("v")

        assert v.type is ir.STRING
        assert v.validation.minimum == 3.0
        assert not ctx.errors

    def test_description_argument(self, ctx: EvalContext) -> None:
        t = user_type(ctx, "T", fn=lambda c: attribute(c, "v", ir.INT, "A value"))
        assert t.attribute.type.field("v").description == "A value"

    def test_duplicate(self, ctx: EvalContext) -> None:
        def body(c):
            attribute(c, "a")
            attribute(c, "a", ir.INT)

        t = user_type(ctx, "T", fn=body)

        assert len(t.attribute.type.fields) == 1
        assert "defined twice" in ctx.errors.errors[0].message

    def test_parent_must_be_object(self, ctx: EvalContext) -> None:
        user_type(ctx, "Code", ir.STRING, fn=lambda c: attribute(c, "x"))

        err = ctx.errors.errors[0]
        assert err.kind == ErrorKind.INCOMPATIBLE_TYPE
        assert "(but type is String)" in err.message

    def test_outside_attribute(self, ctx: EvalContext) -> None:
        service(ctx, "s", lambda c: attribute(c, "a"))
        assert ctx.errors.errors[0].kind == ErrorKind.INCOMPATIBLE_TARGET


class TestDescription:
    def test_on_user_type_goes_to_attribute(self, ctx: EvalContext) -> None:
        t = user_type(ctx, "Account", fn=lambda c: description(c, "An account"))
        assert t.attribute.description == "An account"

    def test_on_service(self, ctx: EvalContext) -> None:
        svc = service(ctx, "calc", lambda c: description(c, "Calculator"))
        assert svc.description == "Calculator"

    def test_top_level(self, ctx: EvalContext) -> None:
        description(ctx, "lost")
        assert ctx.errors.errors[0].kind == ErrorKind.INCOMPATIBLE_TARGET
