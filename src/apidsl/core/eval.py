"""
Design evaluation context.

A design is evaluated by running nested declaration bodies. The
``EvalContext`` is threaded through every DSL call: it owns the scope stack
that decides which declaration node is currently being configured, the
design root that top-level declarations are added to, and the error
collector that failed calls report into.

Example:

    ctx = EvalContext()

    def body(ctx):
        attribute(ctx, "email", STRING, fn=lambda ctx: format_(ctx, "email"))

    user_type(ctx, "Account", fn=body)
    ctx.errors.raise_if_errors()
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .config import DesignConfig
from .errors import ErrorCollector, ErrorContext, ErrorKind, EvalError
from .ir import (
    APISpec,
    AttributeSpec,
    DesignSpec,
    MethodSpec,
    ResultTypeSpec,
    ServiceSpec,
    UserTypeSpec,
)

logger = logging.getLogger(__name__)

# Frames from files under this directory are DSL internals, not design code
_PACKAGE_DIR = Path(__file__).resolve().parent.parent

Node = AttributeSpec | UserTypeSpec | ResultTypeSpec | MethodSpec | ServiceSpec | APISpec

# A declaration body receives the context it runs in
DSLBody = Callable[["EvalContext"], object]


class TargetKind(StrEnum):
    """The closed set of things a DSL call can be configuring."""

    ATTRIBUTE = "attribute"
    COMPOSITE = "composite"  # user type wrapping an attribute
    RESULT_TYPE = "result_type"
    METHOD = "method"
    SERVICE = "service"
    API = "api"
    NONE = "none"  # top level, nothing open


@dataclass(frozen=True)
class Target:
    """The node currently open for configuration, tagged with its kind."""

    kind: TargetKind
    node: Node | None = None

    @property
    def attribute(self) -> AttributeSpec | None:
        """The attribute an attribute-shaped target exposes, unwrapping types."""
        if self.kind == TargetKind.ATTRIBUTE:
            assert isinstance(self.node, AttributeSpec)
            return self.node
        if self.kind in (TargetKind.COMPOSITE, TargetKind.RESULT_TYPE):
            assert isinstance(self.node, UserTypeSpec)
            return self.node.attribute
        return None

    def describe(self) -> str | None:
        if self.node is None:
            return None
        return self.node.eval_name()


def classify(node: Node) -> Target:
    """Tag a declaration node with its target kind."""
    # ResultTypeSpec first: result types are also user types
    if isinstance(node, ResultTypeSpec):
        return Target(TargetKind.RESULT_TYPE, node)
    if isinstance(node, UserTypeSpec):
        return Target(TargetKind.COMPOSITE, node)
    if isinstance(node, AttributeSpec):
        return Target(TargetKind.ATTRIBUTE, node)
    if isinstance(node, MethodSpec):
        return Target(TargetKind.METHOD, node)
    if isinstance(node, ServiceSpec):
        return Target(TargetKind.SERVICE, node)
    if isinstance(node, APISpec):
        return Target(TargetKind.API, node)
    raise TypeError(f"{type(node).__name__} is not a declaration node")


class EvalContext:
    """
    State of one design evaluation pass.

    Attributes:
        config: Evaluation settings
        design: Root of the design being built
        errors: Errors reported so far
    """

    def __init__(self, config: DesignConfig | None = None):
        self.config = config or DesignConfig()
        self.design = DesignSpec()
        self.errors = ErrorCollector()
        self._stack: list[Target] = []

    def current(self) -> Target:
        """Return the innermost open declaration, or a ``NONE`` target."""
        if not self._stack:
            return Target(TargetKind.NONE)
        return self._stack[-1]

    @contextmanager
    def scope(self, node: Node) -> Iterator[Target]:
        """Make ``node`` the current target for the duration of the block."""
        target = classify(node)
        self._stack.append(target)
        try:
            yield target
        finally:
            self._stack.pop()

    def execute(self, fn: DSLBody | None, node: Node) -> bool:
        """
        Run a declaration body with ``node`` as the current target.

        Returns:
            True if the body reported no errors
        """
        if fn is None:
            return True
        before = len(self.errors)
        with self.scope(node):
            fn(self)
        return len(self.errors) == before

    def report_error(self, kind: ErrorKind, message: str) -> None:
        """Record an error against the current target and keep going."""
        context = self._caller_context() if self.config.capture_source else None
        error = EvalError(
            kind=kind,
            message=message,
            target=self.current().describe(),
            context=context,
        )
        self.errors.report(error)
        logger.debug("Design error (%s): %s", kind, error)

    def incompatible_dsl(self, dsl_name: str) -> None:
        """Report a DSL function used where the current target does not support it."""
        if self.current().kind == TargetKind.NONE:
            self.report_error(
                ErrorKind.INCOMPATIBLE_TARGET,
                f"invalid use of {dsl_name} outside of any declaration",
            )
        else:
            self.report_error(ErrorKind.INCOMPATIBLE_TARGET, f"invalid use of {dsl_name}")

    def _caller_context(self) -> ErrorContext | None:
        """Locate the design code that made the failing DSL call."""
        frame = inspect.currentframe()
        try:
            while frame is not None:
                filename = Path(frame.f_code.co_filename)
                if not _is_internal(filename):
                    info = inspect.getframeinfo(frame, context=1)
                    column = None
                    if info.positions is not None and info.positions.col_offset is not None:
                        column = info.positions.col_offset + 1
                    snippet = info.code_context[0].rstrip() if info.code_context else None
                    return ErrorContext(
                        file=filename,
                        line=info.lineno,
                        column=column,
                        snippet=snippet,
                    )
                frame = frame.f_back
            return None
        finally:
            del frame


def _is_internal(filename: Path) -> bool:
    if filename.name.startswith("<"):
        return False
    return filename.resolve().is_relative_to(_PACKAGE_DIR)
