"""Castor: typed outcomes with scoped early return.

Public API:
    - Success / Failure: the two outcome variants
    - run(): unwrap-or-terminate scopes producing one outcome
    - run_catching(): scopes that also reify unexpected exceptions
    - collect() / map_values(): helpers over sequences of outcomes
    - Config: logging switches for scope execution
"""

from __future__ import annotations

import logging

from castor.catching import (
    ExpectedFailure,
    ScopeFault,
    UnexpectedFault,
    caught,
    map_unexpected_fault,
    run_catching,
    scoped_catching,
)
from castor.config import Config, resolve_config
from castor.errors import (
    CastorError,
    ConfigurationError,
    ScopeMisuseError,
    UnwrapError,
)
from castor.outcome import Failure, Outcome, Success, reject_none
from castor.scope import ResultScope, run, scoped
from castor.sequences import (
    collect,
    iter_map_errors,
    iter_map_values,
    map_errors,
    map_values,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("castor-outcome")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("castor").addHandler(logging.NullHandler())

__all__ = [
    "CastorError",
    "Config",
    "ConfigurationError",
    "ExpectedFailure",
    "Failure",
    "Outcome",
    "ResultScope",
    "ScopeFault",
    "ScopeMisuseError",
    "Success",
    "UnexpectedFault",
    "UnwrapError",
    "caught",
    "collect",
    "iter_map_errors",
    "iter_map_values",
    "map_errors",
    "map_unexpected_fault",
    "map_values",
    "reject_none",
    "resolve_config",
    "run",
    "run_catching",
    "scoped",
    "scoped_catching",
]
