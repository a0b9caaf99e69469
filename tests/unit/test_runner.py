"""Tests for running and loading designs."""

from pathlib import Path

import pytest

from apidsl import run_design
from apidsl.core import ir
from apidsl.core.config import DesignConfig
from apidsl.core.errors import ErrorKind, LoadError
from apidsl.dsl import attribute, format_, max_length, min_length, minimum, user_type
from apidsl.runner import load_design


def test_run_design_collects_everything() -> None:
    def design(ctx):
        def account(c):
            def email(c):
                format_(c, ir.ValidationFormat.EMAIL)
                min_length(c, 3)
                max_length(c, 254)

            attribute(c, "email", ir.STRING, fn=email)
            attribute(c, "age", ir.STRING, fn=lambda c: minimum(c, 0))
            attribute(c, "score", ir.INT, fn=lambda c: minimum(c, "high"))

        user_type(ctx, "Account", fn=account)

    outcome = run_design(design)

    assert not outcome.ok
    assert [e.kind for e in outcome.errors] == [
        ErrorKind.INCOMPATIBLE_TYPE,
        ErrorKind.INVALID_VALUE,
    ]
    email = outcome.design.get_type("Account").attribute.type.field("email")
    assert email.validation.format == "email"
    assert email.validation.max_length == 254


def test_run_design_ok() -> None:
    outcome = run_design(lambda ctx: user_type(ctx, "Empty"))

    assert outcome.ok
    assert outcome.errors == []


def test_run_design_uses_config() -> None:
    def design(ctx):
        user_type(
            ctx,
            "Phone",
            fn=lambda c: attribute(c, "number", ir.STRING, fn=lambda a: format_(a, "phone")),
        )

    assert not run_design(design).ok

    outcome = run_design(design, DesignConfig(extra_formats=["phone"]))

    assert outcome.ok
    number = outcome.design.get_type("Phone").attribute.type.field("number")
    assert number.validation.format == "phone"


class TestLoadDesign:
    def test_loads_design_function(self, write_design) -> None:
        path = write_design(
            """
def design(ctx):
    user_type(ctx, "Account", fn=lambda c: attribute(c, "id", INT))
"""
        )

        outcome = run_design(load_design(path))

        assert outcome.ok
        assert outcome.design.get_type("Account").attribute.type.field("id").type.kind == "int"

    def test_error_location_points_at_design_file(self, write_design) -> None:
        path = write_design(
            """
def design(ctx):
    def body(c):
        pattern(c, "[a-z")

    user_type(ctx, "Code", STRING)
    user_type(ctx, "Token", fn=lambda c: attribute(c, "value", STRING, fn=body))
"""
        )

        outcome = run_design(load_design(path))

        context = outcome.errors[0].context
        assert Path(context.file).name == "design.py"
        assert context.line == 7
        assert 'pattern(c, "[a-z")' in context.snippet

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="not found"):
            load_design(tmp_path / "missing.py")

    def test_syntax_error(self, write_design) -> None:
        path = write_design("def design(ctx)\n    pass\n")

        with pytest.raises(LoadError, match="Syntax error") as exc_info:
            load_design(path)

        assert exc_info.value.context.file == path

    def test_import_error(self, write_design) -> None:
        path = write_design("raise RuntimeError('boom')\n")

        with pytest.raises(LoadError, match="boom"):
            load_design(path)

    def test_no_design_function(self, write_design) -> None:
        path = write_design("DESIGN = 1\n")

        with pytest.raises(LoadError, match="does not define"):
            load_design(path)
