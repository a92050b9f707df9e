"""Configuration utilities for PROPSPY.

Settings are read from the environment; the pytest plugin lets ini and
command-line options take precedence over them.
"""

import logging
import os
from enum import Enum

LEAK_POLICY_ENV = "PROPSPY_LEAK_POLICY"  # pragma: no mutate
LOG_LEVEL_ENV = "PROPSPY_LOG_LEVEL"  # pragma: no mutate


class ConfigError(ValueError):
    """Base class for invalid configuration values."""


class InvalidLeakPolicyError(ConfigError):
    """Raised when a leak policy value is not recognised."""

    def __init__(self, value: str) -> None:
        choices = ", ".join(p.value for p in LeakPolicy)
        super().__init__(f"Invalid leak policy {value!r}; expected one of: {choices}.")
        self.value = value


class InvalidLogLevelError(ConfigError):
    """Raised when a log level name is not recognised."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid log level: {value}")
        self.value = value


class LeakPolicy(Enum):
    """What to do when a test ends with operations still wrapped.

    The operations are always restored; the policy only decides how loudly.

    Policies:
        IGNORE: Restore silently.
        WARN: Restore and log a warning naming the operations.
        ERROR: Restore and fail the test's teardown.
    """

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


DEFAULT_LEAK_POLICY = LeakPolicy.WARN


def parse_leak_policy(value: str) -> LeakPolicy:
    """Parse a case-insensitive leak policy name.

    Raises:
        InvalidLeakPolicyError: If ``value`` names no policy.
    """
    try:
        return LeakPolicy(value.strip().lower())
    except ValueError as e:
        raise InvalidLeakPolicyError(value) from e


def get_leak_policy() -> LeakPolicy:
    """Get the leak policy from `PROPSPY_LEAK_POLICY`, defaulting to ``warn``."""
    if not (value := os.environ.get(LEAK_POLICY_ENV)):
        return DEFAULT_LEAK_POLICY
    return parse_leak_policy(value)


def parse_log_level(value: str) -> int:
    """Convert a level name such as ``"debug"`` into its numeric level.

    Raises:
        InvalidLogLevelError: If ``value`` is not a standard level name.
    """
    if not isinstance(lvl := getattr(logging, value.strip().upper(), None), int):
        raise InvalidLogLevelError(value)
    return lvl


def get_log_level() -> int | None:
    """Get the console log level from `PROPSPY_LOG_LEVEL`, or None when unset."""
    if not (value := os.environ.get(LOG_LEVEL_ENV)):
        return None
    return parse_log_level(value)
