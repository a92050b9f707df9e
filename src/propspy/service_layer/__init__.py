"""Harness services: interception, dispatch, assertions and queries."""

from .dispatcher import SyntheticEventDispatcher
from .registry import InterceptionRegistry, ObservableHandle

__all__ = ["InterceptionRegistry", "ObservableHandle", "SyntheticEventDispatcher"]
