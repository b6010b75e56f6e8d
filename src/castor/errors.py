"""Exception hierarchy for Castor.

Only misuse of the library raises. Domain failures travel as ``Failure``
values and never surface through this hierarchy.
"""

from __future__ import annotations

from typing import Any


class CastorError(Exception):
    """Base exception for all Castor errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        """Return the message, followed by the hint when one is attached."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class UnwrapError(CastorError, AttributeError):
    """A variant-specific accessor was called on the other variant.

    ``outcome`` holds the offending ``Success`` or ``Failure`` so callers can
    inspect what was actually there. It is also an ``AttributeError``, so
    ``hasattr(failure, "value")`` is False and ``getattr`` defaults apply.
    """

    def __init__(
        self, message: str, *, outcome: Any, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.outcome = outcome


class ScopeMisuseError(CastorError):
    """A scope handle was used outside the activation that created it.

    Also raised when a block suppresses the engine's termination signal or
    hands back an awaitable from a synchronous scope.
    """


class ConfigurationError(CastorError):
    """Configuration validation or resolution failed."""


HINTS = {
    "value_on_failure": (
        "Check is_success() first, or use value_or()/ok() for a fallback."
    ),
    "error_on_success": (
        "Check is_failure() first, or use err() to get None for a Success."
    ),
    "closed_scope": (
        "Scope handles are only valid inside their own block; do not store "
        "them or call them after run() returned."
    ),
    "foreign_thread": (
        "Each thread must open its own scope with run() or run_catching()."
    ),
    "suppressed_signal": (
        "Do not catch BaseException inside a scope block, and do not return "
        "from a finally clause that follows unwrap()."
    ),
    "awaitable_block": (
        "Scopes are synchronous; await the coroutine before entering run()."
    ),
    "bad_intercept": (
        "Pass a tuple of exception classes, e.g. intercept=(OSError, ValueError)."
    ),
}
