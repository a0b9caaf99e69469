"""
Metadata DSL.

``meta`` attaches free-form key/value pairs to the current declaration.
Each key holds a list of strings, so calling ``meta`` repeatedly with the
same key builds the list up in call order. Metadata may be set on
attributes, user types, result types, methods, services and the API.

While keys can be anything, downstream generators give some of them
meaning, for example:

``type:generate:force`` forces code generation for the type it is set on,
optionally limited to the services named in the values.

``struct:error:name`` marks the attribute of an error result type whose
value selects the returned error.

``struct:field:name`` overrides the generated field name of an attribute:

    meta(ctx, "struct:field:name", "ServiceName")

``struct:tag:xxx`` sets the struct tag ``xxx`` of the generated field:

    meta(ctx, "struct:tag:json", "myName,omitempty")

``swagger:generate`` disables OpenAPI generation for a service or method
when set to "false".

``swagger:extension:xxx`` sets the OpenAPI extension ``xxx``:

    meta(ctx, "swagger:extension:x-api", '{"foo":"bar"}')
"""

from __future__ import annotations

import logging

from ..core.eval import EvalContext, TargetKind

logger = logging.getLogger(__name__)

_META_TARGETS = frozenset(
    {
        TargetKind.ATTRIBUTE,
        TargetKind.COMPOSITE,
        TargetKind.RESULT_TYPE,
        TargetKind.METHOD,
        TargetKind.SERVICE,
        TargetKind.API,
    }
)


def meta(ctx: EvalContext, key: str, *values: str) -> None:
    """Append ``values`` to the metadata stored under ``key`` on the current declaration."""
    target = ctx.current()
    if target.kind not in _META_TARGETS:
        ctx.incompatible_dsl("meta")
        return

    if target.kind == TargetKind.COMPOSITE:
        # metadata set in a type declaration belongs to the wrapped attribute
        node = target.attribute
    else:
        node = target.node

    node.append_meta(key, *values)
    logger.debug("meta %r += %r on %s", key, values, node.eval_name())
