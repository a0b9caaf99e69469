"""Shared pytest fixtures for apidsl tests."""

from pathlib import Path

import pytest

from apidsl.core import ir
from apidsl.core.config import DesignConfig
from apidsl.core.eval import EvalContext


@pytest.fixture
def ctx() -> EvalContext:
    """Return a fresh evaluation context."""
    return EvalContext()


@pytest.fixture
def string_attribute() -> ir.AttributeSpec:
    """Return a string attribute with no validations."""
    return ir.AttributeSpec(name="email", type=ir.STRING)


@pytest.fixture
def int_attribute() -> ir.AttributeSpec:
    """Return an integer attribute with no validations."""
    return ir.AttributeSpec(name="count", type=ir.INT)


@pytest.fixture
def untyped_attribute() -> ir.AttributeSpec:
    """Return an attribute whose type is not resolved yet."""
    return ir.AttributeSpec(name="pending")


@pytest.fixture
def object_attribute() -> ir.AttributeSpec:
    """Return an object attribute with two fields."""
    return ir.AttributeSpec(
        name="account",
        type=ir.DataType(
            kind=ir.TypeKind.OBJECT,
            fields=[
                ir.AttributeSpec(name="a", type=ir.STRING),
                ir.AttributeSpec(name="b", type=ir.INT),
            ],
        ),
    )


@pytest.fixture
def write_design(tmp_path: Path):
    """Return a helper that writes a design file importing the whole DSL."""

    def _write(body: str, name: str = "design.py") -> Path:
        path = tmp_path / name
        path.write_text(
            "from apidsl.core.ir import *\nfrom apidsl.dsl import *\n\n" + body,
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def quiet_config() -> DesignConfig:
    """Return a config that does not capture source locations."""
    return DesignConfig(capture_source=False)
