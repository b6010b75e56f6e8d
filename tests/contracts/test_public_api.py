"""Public API contracts: exports, docstrings and hidden signals."""

from __future__ import annotations

import inspect
import logging

import pytest

import castor
from castor import catching, config, errors, outcome, scope, sequences

pytestmark = pytest.mark.contract


def test_all_exports_resolve() -> None:
    for name in castor.__all__:
        assert hasattr(castor, name), name


def test_exports_are_sorted_and_unique() -> None:
    assert list(castor.__all__) == sorted(set(castor.__all__))


def test_public_callables_are_documented() -> None:
    """Modules and public classes carry docstrings."""
    for module in (catching, config, errors, outcome, scope, sequences):
        assert inspect.getdoc(module), module.__name__

    for name in castor.__all__:
        obj = getattr(castor, name)
        if inspect.isclass(obj) or inspect.isfunction(obj):
            assert inspect.getdoc(obj), name


def test_termination_signal_is_not_exported() -> None:
    """Callers never see the engine's signal type."""
    exported = [getattr(castor, name) for name in castor.__all__]

    assert scope._ScopeExit not in exported
    assert not issubclass(scope._ScopeExit, Exception)
    assert issubclass(scope._ScopeExit, BaseException)


def test_library_logger_has_null_handler() -> None:
    handlers = logging.getLogger("castor").handlers

    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_version_is_a_string() -> None:
    assert isinstance(castor.__version__, str)
    assert castor.__version__
