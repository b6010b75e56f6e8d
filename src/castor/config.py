"""Configuration: frozen Config with environment resolution.

Castor has no required settings. The two switches below only change what
gets logged, never which outcome a scope produces.

Scopes only ever read ``CASTOR_*`` variables from ``os.environ``. A ``.env``
file is read only when its path is passed to ``Config.from_env`` explicitly,
and never written into the process environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
import logging
import os

import dotenv

from castor.errors import ConfigurationError

log = logging.getLogger(__name__)

_ENV_PREFIX = "CASTOR_"
_TRACE_SCOPES_ENV = "CASTOR_TRACE_SCOPES"
_LOG_UNEXPECTED_FAULTS_ENV = "CASTOR_LOG_UNEXPECTED_FAULTS"

_TRUTHY = frozenset({"1", "true", "yes"})
_FALSY = frozenset({"", "0", "false", "no"})


@dataclass(frozen=True)
class Config:
    """Immutable configuration for scope execution.

    Example:
        config = Config(trace_scopes=True)
        outcome = run(block, config=config)
    """

    #: Log each activation's terminal state at DEBUG.
    trace_scopes: bool = False
    #: Log intercepted faults at WARNING with traceback instead of DEBUG.
    log_unexpected_faults: bool = False

    def __post_init__(self) -> None:
        """Reject non-boolean switches early for clear errors."""
        for name in ("trace_scopes", "log_unexpected_faults"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"{name} must be a bool, got {type(value).__name__}",
                    hint=f"Pass Config({name}=True) or Config({name}=False).",
                )

    @classmethod
    def from_env(cls, dotenv_path: str | os.PathLike[str] | None = None) -> Config:
        """Build a Config from ``CASTOR_*`` variables.

        When ``dotenv_path`` is given, ``CASTOR_*`` keys from that file are
        used as defaults under the process environment. Other keys in the file
        are ignored, and ``os.environ`` is never modified.

        Raises:
            ConfigurationError: A switch holds an unrecognised value.
        """
        values = _castor_values(dotenv_path)
        return cls(
            trace_scopes=_parse_flag(_TRACE_SCOPES_ENV, values),
            log_unexpected_faults=_parse_flag(_LOG_UNEXPECTED_FAULTS_ENV, values),
        )


def _castor_values(dotenv_path: str | os.PathLike[str] | None) -> dict[str, str]:
    values: dict[str, str] = {}
    if dotenv_path is not None:
        for key, value in dotenv.dotenv_values(dotenv_path).items():
            if key.startswith(_ENV_PREFIX):
                values[key] = value or ""
    values.update(
        (key, value) for key, value in os.environ.items() if key.startswith(_ENV_PREFIX)
    )
    return values


def _parse_flag(name: str, values: dict[str, str]) -> bool:
    raw = values.get(name, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ConfigurationError(
        f"Invalid value for {name}: {raw!r}",
        hint=f"Set {name} to 1/0, true/false or yes/no.",
    )


@cache
def _env_config() -> Config:
    # Logging switches must never stop a scope from running.
    try:
        return Config.from_env()
    except ConfigurationError as exc:
        log.warning("Ignoring invalid Castor configuration: %s", exc)
        return Config()


def resolve_config(config: Config | None = None) -> Config:
    """Return ``config`` when given, else the cached environment config.

    An invalid environment value falls back to the defaults with a single
    warning; call ``Config.from_env()`` directly to get the error instead.
    """
    if config is not None:
        return config
    return _env_config()


def reset_config_cache() -> None:
    """Forget the cached environment config so the next call re-reads it."""
    _env_config.cache_clear()
