"""
apidsl design language.

All DSL functions take the evaluation context as their first argument.

- design.py: declarations (api, service, method, payload, result, types, attributes)
- validation.py: attribute validations (enum, format_, pattern, bounds, lengths, required)
- meta.py: key/value metadata
"""

from .design import (
    api,
    attribute,
    description,
    method,
    payload,
    result,
    result_type,
    service,
    user_type,
)
from .meta import meta
from .validation import (
    enum,
    format_,
    max_length,
    maximum,
    min_length,
    minimum,
    pattern,
    required,
)

__all__ = [
    # Declarations
    "api",
    "attribute",
    "description",
    "method",
    "payload",
    "result",
    "result_type",
    "service",
    "user_type",
    # Metadata
    "meta",
    # Validations
    "enum",
    "format_",
    "max_length",
    "maximum",
    "min_length",
    "minimum",
    "pattern",
    "required",
]
