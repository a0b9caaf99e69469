"""
Validation DSL.

These functions add JSON-schema style validations to the attribute being
declared. When the attribute type is already known the validation is
checked against it; when it is not (an attribute declared with a body but
no explicit type) the validation is recorded as is.

Failures are reported to the evaluation context and leave the attribute
unchanged; evaluation carries on with the next call.

    def body(ctx):
        format_(ctx, ValidationFormat.EMAIL)
        min_length(ctx, 3)
        max_length(ctx, 254)

    attribute(ctx, "email", STRING, fn=body)
"""

from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Collection
from decimal import Decimal
from typing import Any

from ..core.errors import ErrorKind
from ..core.eval import EvalContext, TargetKind
from ..core.ir import (
    LENGTH_KINDS,
    NUMERIC_KINDS,
    AttributeSpec,
    TypeKind,
    UserTypeSpec,
    ValidationFormat,
)

logger = logging.getLogger(__name__)

_REQUIRED_TARGETS = frozenset({TargetKind.ATTRIBUTE, TargetKind.COMPOSITE, TargetKind.RESULT_TYPE})
_FORMAT_VALUES = frozenset(f.value for f in ValidationFormat)
_LENGTH_EXPECTED = "a string, bytes, an array or a map"
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def enum(ctx: EvalContext, *values: Any) -> None:
    """
    Restrict the attribute to a set of allowed values.

    Every value is checked against the attribute type and each incompatible
    one is reported; the values are only recorded if all of them pass.
    """
    att = _current_attribute(ctx, "enum")
    if att is None:
        return

    ok = True
    for i, value in enumerate(values):
        if not att.is_compatible(value):
            ctx.report_error(
                ErrorKind.INVALID_VALUE,
                f"value {value!r} at index {i} is incompatible with attribute of type "
                f"{att.type_name()}",
            )
            ok = False
    if not ok:
        return

    att.ensure_validation().values = list(values)
    logger.debug("enum %r on %s", values, att.eval_name())


def format_(ctx: EvalContext, tag: ValidationFormat | str) -> None:
    """
    Require a string attribute to follow a well-known format.

    The built-in formats are listed in ``ValidationFormat``; more can be
    allowed with the ``extra_formats`` setting.
    """
    att = _current_attribute(ctx, "format")
    if att is None:
        return

    if not _check_kind(ctx, att, "format", {TypeKind.STRING}, "a string"):
        return
    if not _is_supported_format(ctx, tag):
        ctx.report_error(ErrorKind.INVALID_VALUE, f"invalid validation format {str(tag)!r}")
        return

    att.ensure_validation().format = tag
    logger.debug("format %r on %s", tag, att.eval_name())


def pattern(ctx: EvalContext, expr: str) -> None:
    """Require a string attribute to match a regular expression."""
    att = _current_attribute(ctx, "pattern")
    if att is None:
        return
    if not _check_kind(ctx, att, "pattern", {TypeKind.STRING}, "a string"):
        return

    try:
        re.compile(expr)
    except (re.error, TypeError) as e:
        ctx.report_error(ErrorKind.INVALID_VALUE, f"invalid pattern {expr!r}, compile failed: {e}")
        return

    att.ensure_validation().pattern = expr
    logger.debug("pattern %r on %s", expr, att.eval_name())


def minimum(ctx: EvalContext, value: Any) -> None:
    """Set the inclusive lower bound of a numeric attribute."""
    att = _current_attribute(ctx, "minimum")
    if att is None:
        return
    if not _check_kind(ctx, att, "minimum", NUMERIC_KINDS, "an integer or a number"):
        return

    number = _to_float(ctx, value)
    if number is None:
        return

    att.ensure_validation().minimum = number
    logger.debug("minimum %r on %s", number, att.eval_name())


def maximum(ctx: EvalContext, value: Any) -> None:
    """Set the inclusive upper bound of a numeric attribute."""
    att = _current_attribute(ctx, "maximum")
    if att is None:
        return
    if not _check_kind(ctx, att, "maximum", NUMERIC_KINDS, "an integer or a number"):
        return

    number = _to_float(ctx, value)
    if number is None:
        return

    att.ensure_validation().maximum = number
    logger.debug("maximum %r on %s", number, att.eval_name())


def min_length(ctx: EvalContext, n: int) -> None:
    """Set the minimum length of a string, bytes, array or map attribute."""
    att = _current_attribute(ctx, "min_length")
    if att is None:
        return
    if not _check_kind(ctx, att, "minimum length", LENGTH_KINDS, _LENGTH_EXPECTED):
        return
    if not _is_length(ctx, n):
        return

    att.ensure_validation().min_length = n
    logger.debug("min_length %r on %s", n, att.eval_name())


def max_length(ctx: EvalContext, n: int) -> None:
    """Set the maximum length of a string, bytes, array or map attribute."""
    att = _current_attribute(ctx, "max_length")
    if att is None:
        return
    if not _check_kind(ctx, att, "maximum length", LENGTH_KINDS, _LENGTH_EXPECTED):
        return
    if not _is_length(ctx, n):
        return

    att.ensure_validation().max_length = n
    logger.debug("max_length %r on %s", n, att.eval_name())


def required(ctx: EvalContext, *names: str) -> None:
    """
    Mark fields of an object attribute as required.

    Can be used in attribute, type and result type declarations. Names add
    up across calls; duplicates are kept unless ``dedupe_required`` is set.
    """
    target = ctx.current()
    if target.kind not in _REQUIRED_TARGETS:
        ctx.incompatible_dsl("required")
        return
    att = target.attribute
    assert att is not None

    if not _check_kind(ctx, att, "required", {TypeKind.OBJECT}, "an object"):
        return

    att.ensure_validation().add_required(*names, dedupe=ctx.config.dedupe_required)
    logger.debug("required %r on %s", names, att.eval_name())


# =============================================================================
# Helpers
# =============================================================================


def _current_attribute(ctx: EvalContext, dsl_name: str) -> AttributeSpec | None:
    """Return the current attribute, reporting an error if the target is anything else."""
    target = ctx.current()
    if target.kind != TargetKind.ATTRIBUTE:
        ctx.incompatible_dsl(dsl_name)
        return None
    return target.attribute


def _check_kind(
    ctx: EvalContext,
    att: AttributeSpec,
    validation: str,
    allowed: Collection[TypeKind],
    expected: str,
) -> bool:
    """Check the attribute kind against ``allowed``; unresolved types always pass."""
    kind = att.kind
    if kind is None or kind in allowed:
        return True
    actual = att.type_name()
    if isinstance(att.type, UserTypeSpec):
        actual = f"{actual} ({kind})"
    ctx.report_error(
        ErrorKind.INCOMPATIBLE_TYPE,
        f"invalid {validation} validation definition: attribute must be {expected} "
        f"(but type is {actual})",
    )
    return False


def _is_supported_format(ctx: EvalContext, tag: ValidationFormat | str) -> bool:
    if isinstance(tag, ValidationFormat):
        return True
    if not isinstance(tag, str):
        return False
    return tag in _FORMAT_VALUES or tag in ctx.config.extra_formats


def _to_float(ctx: EvalContext, value: Any) -> float | None:
    """
    Normalize a bound to a float.

    Accepts any real number (but not a bool) or a plain decimal string such
    as "42", "-1.5" or "1e3". Padding and digit separators are
    rejected. Integer-ness is not preserved.
    """
    if isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool):
        try:
            return float(value)
        except (OverflowError, ValueError):
            pass
    elif isinstance(value, str) and _DECIMAL_RE.fullmatch(value):
        return float(value)
    ctx.report_error(ErrorKind.INVALID_VALUE, f"invalid number value {value!r}")
    return None


def _is_length(ctx: EvalContext, n: Any) -> bool:
    if isinstance(n, int) and not isinstance(n, bool):
        return True
    ctx.report_error(ErrorKind.INVALID_VALUE, f"invalid length value {n!r}")
    return False
