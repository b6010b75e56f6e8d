"""Outcome type: an explicit success-or-failure value.

``Success`` and ``Failure`` are frozen, slotted dataclasses, so outcomes are
immutable, compare by value and work with structural pattern matching::

    match parse_port(raw):
        case Success(port):
            bind(port)
        case Failure(reason):
            log.warning("bad port: %s", reason)

The combinators live on the variants themselves. Each variant implements the
full surface, so code holding an ``Outcome`` never needs an ``isinstance``
check to chain work.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, NoReturn, Self

from castor.errors import HINTS, UnwrapError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """A successful outcome carrying ``value``."""

    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    @property
    def error(self) -> NoReturn:
        """Always raises: a ``Success`` has no error."""
        raise UnwrapError(
            "Called .error on a Success value",
            outcome=self,
            hint=HINTS["error_on_success"],
        )

    def unwrap(self) -> T:
        """Return the success value."""
        return self.value

    def unwrap_error(self) -> NoReturn:
        """Always raises ``UnwrapError``."""
        raise UnwrapError(
            "Called unwrap_error() on a Success value",
            outcome=self,
            hint=HINTS["error_on_success"],
        )

    def ok(self) -> T:
        return self.value

    def err(self) -> None:
        return None

    def value_or(self, default: object) -> T:  # noqa: ARG002
        return self.value

    def map_value[U](self, transform: Callable[[T], U]) -> Success[U]:
        """Return ``Success(transform(value))``."""
        return Success(transform(self.value))

    def map_error(self, transform: Callable[[Any], Any]) -> Self:  # noqa: ARG002
        return self

    def and_then[U, E](
        self, transform: Callable[[T], Success[U] | Failure[E]]
    ) -> Success[U] | Failure[E]:
        """Chain another fallible step on the success value."""
        return transform(self.value)

    def and_then_error(self, transform: Callable[[Any], Any]) -> Self:  # noqa: ARG002
        return self

    def map_or_else[R](
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[Any], R],  # noqa: ARG002
    ) -> R:
        """Fold the outcome into a single value."""
        return on_success(self.value)

    def map_error_or_else[R](
        self,
        on_failure: Callable[[Any], R],  # noqa: ARG002
        on_success: Callable[[T], R],
    ) -> R:
        """Fold with the error handler first; ``on_success`` applies here."""
        return on_success(self.value)

    def on_success(self, action: Callable[[T], object]) -> Self:
        """Call ``action`` with the value and return ``self`` unchanged."""
        action(self.value)
        return self

    def on_failure(self, action: Callable[[Any], object]) -> Self:  # noqa: ARG002
        return self


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E]:
    """A failed outcome carrying ``error``.

    ``error`` is any domain value: a string, an enum member, a dataclass or an
    exception instance. Castor never raises it.
    """

    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    @property
    def value(self) -> NoReturn:
        """Always raises: a ``Failure`` has no value."""
        raise UnwrapError(
            "Called .value on a Failure value",
            outcome=self,
            hint=HINTS["value_on_failure"],
        )

    def unwrap(self) -> NoReturn:
        """Always raises ``UnwrapError``."""
        raise UnwrapError(
            "Called unwrap() on a Failure value",
            outcome=self,
            hint=HINTS["value_on_failure"],
        )

    def unwrap_error(self) -> E:
        """Return the error."""
        return self.error

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self.error

    def value_or[D](self, default: D) -> D:
        return default

    def map_value(self, transform: Callable[[Any], Any]) -> Self:  # noqa: ARG002
        return self

    def map_error[F](self, transform: Callable[[E], F]) -> Failure[F]:
        """Return ``Failure(transform(error))``."""
        return Failure(transform(self.error))

    def and_then(self, transform: Callable[[Any], Any]) -> Self:  # noqa: ARG002
        return self

    def and_then_error[T, F](
        self, transform: Callable[[E], Success[T] | Failure[F]]
    ) -> Success[T] | Failure[F]:
        """Recover from, or re-type, the error with another fallible step."""
        return transform(self.error)

    def map_or_else[R](
        self,
        on_success: Callable[[Any], R],  # noqa: ARG002
        on_failure: Callable[[E], R],
    ) -> R:
        return on_failure(self.error)

    def map_error_or_else[R](
        self,
        on_failure: Callable[[E], R],
        on_success: Callable[[Any], R],  # noqa: ARG002
    ) -> R:
        return on_failure(self.error)

    def on_success(self, action: Callable[[Any], object]) -> Self:  # noqa: ARG002
        return self

    def on_failure(self, action: Callable[[E], object]) -> Self:
        """Call ``action`` with the error and return ``self`` unchanged."""
        action(self.error)
        return self


type Outcome[T, E] = Success[T] | Failure[E]


def reject_none[T, E](outcome: Outcome[T | None, E], error: E) -> Outcome[T, E]:
    """Turn ``Success(None)`` into ``Failure(error)``.

    Any other success passes through, and an existing failure keeps its own
    error.
    """
    if isinstance(outcome, Success) and outcome.value is None:
        return Failure(error)
    return outcome  # type: ignore[return-value]
