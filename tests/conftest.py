"""Pytest configuration and fixtures.

Provides environment isolation and logging capture helpers. Fixtures here are
autouse unless noted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

from castor.config import Config, reset_config_cache

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class StepRecorder:
    """Records which statements of a block actually executed.

    Use to observe short-circuiting: anything after an early termination must
    never show up in ``steps``.
    """

    steps: list[str] = field(default_factory=list)

    def mark(self, step: str, value: Any = None) -> Any:
        self.steps.append(step)
        return value


@pytest.fixture
def recorder() -> StepRecorder:
    return StepRecorder()


@pytest.fixture
def tracing_config() -> Config:
    """Config with every logging switch turned on (not autouse)."""
    return Config(trace_scopes=True, log_unexpected_faults=True)


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_castor_env(monkeypatch):
    """Clear CASTOR_* variables and the cached env config around each test."""
    for key in list(os.environ.keys()):
        if key.startswith("CASTOR_"):
            monkeypatch.delenv(key, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def castor_logs(caplog):
    """Capture DEBUG and above from the castor logger (not autouse)."""
    caplog.set_level(logging.DEBUG, logger="castor")
    return caplog
