"""
Running designs.

A design is a callable taking an ``EvalContext``. ``run_design`` evaluates
it in a fresh context and hands back the built tree together with every
error reported along the way. ``load_design`` imports a design file and
returns its ``design`` function.
"""

from __future__ import annotations

import importlib.util
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .core.config import DesignConfig
from .core.errors import ErrorContext, EvalError, LoadError
from .core.eval import DSLBody, EvalContext
from .core.ir import DesignSpec

logger = logging.getLogger(__name__)

DESIGN_FUNCTION = "design"


@dataclass
class DesignResult:
    """Outcome of evaluating a design."""

    design: DesignSpec
    errors: list[EvalError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def run_design(fn: DSLBody, config: DesignConfig | None = None) -> DesignResult:
    """Evaluate a design function in a fresh context."""
    ctx = EvalContext(config)
    fn(ctx)
    logger.info(
        "Evaluated design: %d service(s), %d type(s), %d error(s)",
        len(ctx.design.services),
        len(ctx.design.types) + len(ctx.design.result_types),
        len(ctx.errors),
    )
    return DesignResult(design=ctx.design, errors=ctx.errors.errors)


def load_design(path: Path) -> DSLBody:
    """
    Import a design file and return its ``design`` function.

    Raises:
        LoadError: If the file is missing, fails to import or has no ``design`` callable
    """
    if not path.is_file():
        raise LoadError(f"Design file not found: {path}")

    module_name = f"_apidsl_design_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(f"Cannot import design file: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except SyntaxError as e:
        context = ErrorContext(
            file=path,
            line=e.lineno or 1,
            column=e.offset,
            snippet=e.text.rstrip() if e.text else None,
        )
        raise LoadError(f"Syntax error in design file: {e.msg}", context) from e
    except Exception as e:
        raise LoadError(f"Error importing {path}: {e}") from e

    fn = getattr(module, DESIGN_FUNCTION, None)
    if not callable(fn):
        raise LoadError(f"{path} does not define a '{DESIGN_FUNCTION}(ctx)' function")
    return fn
