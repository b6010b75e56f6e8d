"""Scope engine: unwrap-or-terminate blocks that produce one outcome.

A block is an ordinary function that receives a ``ResultScope`` handle::

    def checkout(scope: ResultScope[Receipt, str]) -> Receipt:
        cart = scope.unwrap(load_cart(user_id))
        payment = scope.unwrap(charge(cart.total))
        if payment.flagged:
            scope.return_failure("payment flagged for review")
        return Receipt(cart, payment)

    outcome = run(checkout)

``unwrap`` on a ``Failure`` ends the block on the spot and ``run`` returns that
failure. Early termination is carried by a private signal raised at the call
site and caught at the boundary that owns the handle. The signal derives from
``BaseException`` so an ``except Exception`` inside the block cannot swallow
it, and it never escapes ``run``.

Each activation owns its handle and the handle owns the pending terminal
outcome; there is no module-level mutable state, so concurrent and nested
scopes are independent.
"""

from __future__ import annotations

from enum import Enum
import functools
import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, Concatenate, NoReturn, overload

from castor.config import Config, resolve_config
from castor.errors import HINTS, ScopeMisuseError
from castor.outcome import Failure, Outcome, Success

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)


class Termination(Enum):
    """How an activation ended. Exactly one applies per activation."""

    NATURAL_COMPLETION = "natural_completion"
    FAILURE_VIA_UNWRAP = "failure_via_unwrap"
    EXPLICIT_SUCCESS = "explicit_success"
    EXPLICIT_FAILURE = "explicit_failure"
    INTERCEPTED_FAULT = "intercepted_fault"


class _ScopeExit(BaseException):
    """Unwinds a block up to the boundary of ``scope``."""

    def __init__(self, scope: ResultScope[Any, Any]) -> None:
        super().__init__()
        self.scope = scope


class ResultScope[T, E]:
    """Handle passed to a block run by ``run`` or ``run_catching``.

    ``T`` is the block's success type and ``E`` the single error type shared
    by every ``unwrap`` and ``return_failure`` in the block. Outcomes with a
    different error type must be mapped first::

        port = scope.unwrap(parse_port(raw).map_error(str))
    """

    __slots__ = ("_open", "_terminal", "_termination", "_thread_id")

    def __init__(self) -> None:
        self._terminal: Outcome[T, E] | None = None
        self._termination: Termination | None = None
        self._open = True
        self._thread_id = threading.get_ident()

    def unwrap[U](self, outcome: Outcome[U, E]) -> U:
        """Return the success value, or end the block with the failure.

        Raises:
            TypeError: ``outcome`` is not a ``Success`` or ``Failure``.
            ScopeMisuseError: The handle is closed or used from another thread.
        """
        self._check_usable("unwrap")
        if isinstance(outcome, Failure):
            self._terminate(outcome, Termination.FAILURE_VIA_UNWRAP)
        if not isinstance(outcome, Success):
            raise TypeError(
                f"unwrap() expects a Success or Failure, got {type(outcome).__name__}"
            )
        return outcome.value

    def return_success(self, value: T) -> NoReturn:
        """End the block; the scope produces ``Success(value)``."""
        self._check_usable("return_success")
        self._terminate(Success(value), Termination.EXPLICIT_SUCCESS)

    def return_failure(self, error: E) -> NoReturn:
        """End the block; the scope produces ``Failure(error)``."""
        self._check_usable("return_failure")
        self._terminate(Failure(error), Termination.EXPLICIT_FAILURE)

    @property
    def is_open(self) -> bool:
        return self._open

    def _check_usable(self, operation: str) -> None:
        if not self._open:
            raise ScopeMisuseError(
                f"{operation}() called on a scope whose block already returned",
                hint=HINTS["closed_scope"],
            )
        if threading.get_ident() != self._thread_id:
            raise ScopeMisuseError(
                f"{operation}() called from a thread that does not own this scope",
                hint=HINTS["foreign_thread"],
            )

    def _terminate(
        self, outcome: Outcome[Any, Any], termination: Termination
    ) -> NoReturn:
        if self._terminal is not None:
            # A previous signal never reached the boundary.
            raise ScopeMisuseError(
                "Scope was terminated twice; the first termination was suppressed",
                hint=HINTS["suppressed_signal"],
            )
        self._terminal = outcome
        self._termination = termination
        raise _ScopeExit(self)

    def _consume(self) -> tuple[Outcome[T, E], Termination]:
        terminal, termination = self._terminal, self._termination
        self._terminal = None
        self._termination = None
        if terminal is None or termination is None:
            raise ScopeMisuseError(
                "Scope signal reached its boundary without a terminal outcome",
                hint=HINTS["suppressed_signal"],
            )
        return terminal, termination

    def _close(self) -> None:
        self._open = False

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"<ResultScope {state}>"


def execute_block[T, E](
    block: Callable[[ResultScope[T, E]], T], scope: ResultScope[T, E]
) -> tuple[Outcome[T, E], Termination]:
    """Run ``block`` inside the boundary of ``scope`` and report how it ended.

    Signals owned by ``scope`` are absorbed here. Signals owned by an
    enclosing scope, and every ordinary exception, propagate unchanged.
    """
    try:
        value = block(scope)
    except _ScopeExit as signal:
        if signal.scope is not scope:
            raise
        return scope._consume()
    finally:
        scope._close()

    if scope._terminal is not None:
        raise ScopeMisuseError(
            "Block returned normally after the scope was terminated",
            hint=HINTS["suppressed_signal"],
        )
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise ScopeMisuseError(
            "Scope block returned an awaitable",
            hint=HINTS["awaitable_block"],
        )
    return Success(value), Termination.NATURAL_COMPLETION


def block_name(block: Callable[..., Any]) -> str:
    return getattr(block, "__qualname__", None) or repr(block)


def trace_termination(name: str, termination: Termination, config: Config) -> None:
    if config.trace_scopes:
        log.debug("scope %s ended: %s", name, termination.value)


def run[T, E](
    block: Callable[[ResultScope[T, E]], T], *, config: Config | None = None
) -> Outcome[T, E]:
    """Run ``block`` with a fresh scope handle and return its outcome.

    Args:
        block: Callable taking the scope handle. Its return value becomes the
            success value unless the block terminated early.
        config: Optional configuration; defaults to the environment config.

    Returns:
        ``Success`` from natural completion or ``return_success``; ``Failure``
        from a failing ``unwrap`` or ``return_failure``.

    Raises:
        ScopeMisuseError: The block suppressed the termination signal or
            returned an awaitable.

    Any other exception raised by the block propagates unchanged.

    Example:
        outcome = run(lambda scope: scope.unwrap(a) + scope.unwrap(b))
    """
    cfg = resolve_config(config)
    return _run_named(block, cfg, block_name(block))


def _run_named[T, E](
    block: Callable[[ResultScope[T, E]], T], config: Config, name: str
) -> Outcome[T, E]:
    scope: ResultScope[T, E] = ResultScope()
    outcome, termination = execute_block(block, scope)
    trace_termination(name, termination, config)
    return outcome


@overload
def scoped[**P, T, E](
    fn: Callable[Concatenate[ResultScope[T, E], P], T], /
) -> Callable[P, Outcome[T, E]]: ...
@overload
def scoped[**P, T, E](
    *, config: Config | None = None
) -> Callable[
    [Callable[Concatenate[ResultScope[T, E], P], T]], Callable[P, Outcome[T, E]]
]: ...
def scoped(fn: Any = None, /, *, config: Config | None = None) -> Any:
    """Decorate ``fn(scope, *args, **kwargs)`` so each call runs in a new scope.

    Example:
        @scoped
        def total(scope: ResultScope[int, str], a: str, b: str) -> int:
            return scope.unwrap(parse_int(a)) + scope.unwrap(parse_int(b))

        total("2", "3")  # Success(5)
    """

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        name = block_name(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome[Any, Any]:
            cfg = resolve_config(config)
            return _run_named(
                lambda scope: func(scope, *args, **kwargs), cfg, name
            )

        return wrapper

    if fn is None:
        return decorate
    return decorate(fn)
