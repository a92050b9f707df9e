"""Domain model of the harness: call records, synthetic events and errors."""

from .errors import (
    DoubleWrapError,
    ExpectationError,
    HarnessError,
    LeakedInterceptionError,
    NoHandlerError,
    NotFoundError,
)
from .records import PENDING, CallRecord, InterceptionKey, SyntheticEvent

__all__ = [
    "PENDING",
    "CallRecord",
    "DoubleWrapError",
    "ExpectationError",
    "HarnessError",
    "InterceptionKey",
    "LeakedInterceptionError",
    "NoHandlerError",
    "NotFoundError",
    "SyntheticEvent",
]
