"""Helpers over collections of outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from castor.outcome import Failure, Outcome, Success

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator


def collect[T, E](outcomes: Iterable[Outcome[T, E]]) -> Outcome[list[T], E]:
    """Gather every success value, or stop at the first failure.

    Values keep their original order. The iterable is consumed lazily, so
    nothing after the first failure is pulled from it.

    Example:
        collect([Success(1), Success(2)])      # Success([1, 2])
        collect([Success(5), Failure("e")])    # Failure("e")
    """
    values: list[T] = []
    for outcome in outcomes:
        if isinstance(outcome, Failure):
            return Failure(outcome.error)
        values.append(outcome.value)
    return Success(values)


def map_values[T, U, E](
    outcomes: Iterable[Outcome[T, E]], transform: Callable[[T], U]
) -> list[Outcome[U, E]]:
    """Map every success value; failures are kept in place unchanged."""
    return [outcome.map_value(transform) for outcome in outcomes]


def map_errors[T, E, F](
    outcomes: Iterable[Outcome[T, E]], transform: Callable[[E], F]
) -> list[Outcome[T, F]]:
    """Map every error; successes are kept in place unchanged."""
    return [outcome.map_error(transform) for outcome in outcomes]


def iter_map_values[T, U, E](
    outcomes: Iterable[Outcome[T, E]], transform: Callable[[T], U]
) -> Iterator[Outcome[U, E]]:
    """Lazy ``map_values``: ``transform`` runs as each item is pulled."""
    for outcome in outcomes:
        yield outcome.map_value(transform)


def iter_map_errors[T, E, F](
    outcomes: Iterable[Outcome[T, E]], transform: Callable[[E], F]
) -> Iterator[Outcome[T, F]]:
    """Lazy ``map_errors``."""
    for outcome in outcomes:
        yield outcome.map_error(transform)
