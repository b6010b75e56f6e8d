"""Fault-capturing scopes and the two-tier error taxonomy.

``run_catching`` runs a block exactly like ``run`` but also intercepts
exceptions the block did not mean to produce. The error channel tells the
two apart:

- ``ExpectedFailure(error)``: the block's own logic decided it failed, via
  ``unwrap`` or ``return_failure``.
- ``UnexpectedFault(cause)``: something raised underneath the block. The
  exception object is kept as-is for later classification.

``map_unexpected_fault`` collapses the taxonomy back into a single error type
once the caller knows how to express faults as domain errors::

    outcome = map_unexpected_fault(
        run_catching(import_rows),
        lambda exc: ImportError_(kind="crash", detail=repr(exc)),
    )
"""

from __future__ import annotations

import dataclasses
import functools
import logging
from typing import TYPE_CHECKING, Any, Concatenate, overload

from castor.config import Config, resolve_config
from castor.errors import HINTS, ConfigurationError, ScopeMisuseError
from castor.outcome import Failure, Outcome, Success
from castor.scope import (
    ResultScope,
    Termination,
    _ScopeExit,
    block_name,
    execute_block,
    trace_termination,
)

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)

ExceptionTypes = type[BaseException] | tuple[type[BaseException], ...]

# Engine signals and misuse are never reified, whatever ``intercept`` says.
_NEVER_INTERCEPTED: tuple[type[BaseException], ...] = (
    _ScopeExit,
    ScopeMisuseError,
    KeyboardInterrupt,
    SystemExit,
    GeneratorExit,
)


@dataclasses.dataclass(frozen=True, slots=True)
class ExpectedFailure[E]:
    """A domain failure produced by the block itself."""

    error: E

    def is_expected_failure(self) -> bool:
        return True

    def is_unexpected_fault(self) -> bool:
        return False

    def expected_failure_or_none(self) -> E:
        return self.error

    def unexpected_fault_or_none(self) -> None:
        return None

    def value_or(self, default: object) -> E:  # noqa: ARG002
        """Return the wrapped error."""
        return self.error


@dataclasses.dataclass(frozen=True, slots=True)
class UnexpectedFault:
    """An exception intercepted at a ``run_catching`` boundary."""

    cause: BaseException

    def is_expected_failure(self) -> bool:
        return False

    def is_unexpected_fault(self) -> bool:
        return True

    def expected_failure_or_none(self) -> None:
        return None

    def unexpected_fault_or_none(self) -> BaseException:
        return self.cause

    def value_or[D](self, default: D) -> D:
        """Return ``default``: a fault carries no domain error."""
        return default


type ScopeFault[E] = ExpectedFailure[E] | UnexpectedFault


def _normalize_intercept(intercept: ExceptionTypes) -> tuple[type[BaseException], ...]:
    types = intercept if isinstance(intercept, tuple) else (intercept,)
    if not types or not all(
        isinstance(t, type) and issubclass(t, BaseException) for t in types
    ):
        raise ConfigurationError(
            f"intercept must name exception classes, got {intercept!r}",
            hint=HINTS["bad_intercept"],
        )
    return types


def _report_fault(name: str, exc: BaseException, config: Config) -> None:
    if config.log_unexpected_faults:
        log.warning(
            "Unexpected fault in scope %s: %s", name, exc, exc_info=exc
        )
    else:
        log.debug("Unexpected fault in scope %s: %s", name, type(exc).__name__)


def _run_catching_named[T, E](
    block: Callable[[ResultScope[T, E]], T],
    config: Config,
    intercept: tuple[type[BaseException], ...],
    name: str,
) -> Outcome[T, ScopeFault[E]]:
    scope: ResultScope[T, E] = ResultScope()
    try:
        outcome, termination = execute_block(block, scope)
    except _NEVER_INTERCEPTED:
        raise
    except intercept as exc:
        _report_fault(name, exc, config)
        trace_termination(name, Termination.INTERCEPTED_FAULT, config)
        return Failure(UnexpectedFault(exc))

    trace_termination(name, termination, config)
    return outcome.map_error(ExpectedFailure)


def run_catching[T, E](
    block: Callable[[ResultScope[T, E]], T],
    *,
    intercept: ExceptionTypes = Exception,
    config: Config | None = None,
) -> Outcome[T, ScopeFault[E]]:
    """Run ``block`` like ``run`` and reify unexpected exceptions.

    Args:
        block: Callable taking the scope handle.
        intercept: Exception classes to reify as ``UnexpectedFault``. Anything
            else propagates. Engine signals, ``ScopeMisuseError``,
            ``KeyboardInterrupt``, ``SystemExit`` and ``GeneratorExit`` always
            propagate.
        config: Optional configuration; defaults to the environment config.

    Returns:
        ``Success`` like ``run``; ``Failure(ExpectedFailure(e))`` for failures
        from ``unwrap``/``return_failure``; ``Failure(UnexpectedFault(exc))``
        for an intercepted exception.

    Example:
        outcome = run_catching(lambda scope: int(scope.unwrap(read_field())))
        if outcome.is_failure() and outcome.error.is_unexpected_fault():
            ...
    """
    cfg = resolve_config(config)
    types = _normalize_intercept(intercept)
    return _run_catching_named(block, cfg, types, block_name(block))


def map_unexpected_fault[T, E](
    outcome: Outcome[T, ScopeFault[E]],
    transform: Callable[[BaseException], E],
) -> Outcome[T, E]:
    """Fold a ``run_catching`` outcome into a single error type ``E``.

    ``ExpectedFailure(e)`` becomes ``Failure(e)`` without calling ``transform``;
    ``UnexpectedFault(c)`` becomes ``Failure(transform(c))``; successes pass
    through.
    """
    if isinstance(outcome, Success):
        return outcome
    fault = outcome.error
    if isinstance(fault, ExpectedFailure):
        return Failure(fault.error)
    if isinstance(fault, UnexpectedFault):
        return Failure(transform(fault.cause))
    raise TypeError(
        f"map_unexpected_fault() expects a ScopeFault error, got {type(fault).__name__}"
    )


def caught[T](
    block: Callable[[ResultScope[T, BaseException]], T],
    *,
    intercept: ExceptionTypes = Exception,
    config: Config | None = None,
) -> Outcome[T, BaseException]:
    """Run a scope whose error type is the exception itself.

    ``unwrap`` and ``return_failure`` behave as in ``run``; an intercepted
    exception becomes ``Failure(exc)``.

    Example:
        caught(lambda scope: json.loads(payload))  # Failure(JSONDecodeError(...))
    """
    cfg = resolve_config(config)
    types = _normalize_intercept(intercept)
    outcome = _run_catching_named(block, cfg, types, block_name(block))
    return map_unexpected_fault(outcome, lambda cause: cause)


@overload
def scoped_catching[**P, T, E](
    fn: Callable[Concatenate[ResultScope[T, E], P], T], /
) -> Callable[P, Outcome[T, ScopeFault[E]]]: ...
@overload
def scoped_catching[**P, T, E](
    *, intercept: ExceptionTypes = Exception, config: Config | None = None
) -> Callable[
    [Callable[Concatenate[ResultScope[T, E], P], T]],
    Callable[P, Outcome[T, ScopeFault[E]]],
]: ...
def scoped_catching(
    fn: Any = None,
    /,
    *,
    intercept: ExceptionTypes = Exception,
    config: Config | None = None,
) -> Any:
    """Decorator form of ``run_catching``; see ``scoped``."""
    types = _normalize_intercept(intercept)

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        name = block_name(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome[Any, Any]:
            cfg = resolve_config(config)
            return _run_catching_named(
                lambda scope: func(scope, *args, **kwargs), cfg, types, name
            )

        return wrapper

    if fn is None:
        return decorate
    return decorate(fn)
