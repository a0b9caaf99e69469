"""
apidsl - declarative design language for service APIs.

Designs are plain Python functions that receive an evaluation context and
call the DSL functions in ``apidsl.dsl``. Evaluating a design builds the
declaration tree and collects every error in one pass.
"""

from apidsl._version import __version__
from apidsl.core.config import DesignConfig, load_config
from apidsl.core.errors import DesignError, ErrorKind, EvalError
from apidsl.core.eval import EvalContext, Target, TargetKind
from apidsl.runner import DesignResult, run_design

__all__ = [
    "__version__",
    "DesignConfig",
    "DesignError",
    "DesignResult",
    "ErrorKind",
    "EvalContext",
    "EvalError",
    "Target",
    "TargetKind",
    "load_config",
    "run_design",
]
