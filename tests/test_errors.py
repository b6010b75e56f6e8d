from __future__ import annotations

import pytest

from castor.errors import (
    HINTS,
    CastorError,
    ConfigurationError,
    ScopeMisuseError,
    UnwrapError,
)
from castor.outcome import Failure

pytestmark = pytest.mark.unit


def test_message_includes_hint_when_present() -> None:
    err = CastorError("boom", hint="do this")

    assert str(err) == "boom. do this"
    assert err.hint == "do this"
    assert err.args == ("boom",)


def test_hint_defaults_to_none() -> None:
    err = CastorError("fail")

    assert err.hint is None
    assert str(err) == "fail"


def test_unwrap_error_keeps_offending_outcome() -> None:
    failure = Failure("e")
    err = UnwrapError("wrong variant", outcome=failure)

    assert err.outcome is failure


def test_subclass_hierarchy() -> None:
    """Every library error is catchable as CastorError and Exception."""
    for cls in (UnwrapError, ScopeMisuseError, ConfigurationError):
        assert issubclass(cls, CastorError)
        assert issubclass(cls, Exception)


def test_unwrap_error_is_an_attribute_error() -> None:
    err = UnwrapError("wrong variant", outcome=Failure("e"))

    assert isinstance(err, AttributeError)
    assert str(err) == "wrong variant"


def test_hints_are_actionable_sentences() -> None:
    for key, hint in HINTS.items():
        assert hint.strip(), key
        assert hint.rstrip().endswith("."), key
