"""Interfaces for the UI component collaborator.

The harness does not own components. It needs a renderer that can construct a
component with initial props, expose the element tree it rendered, look up the
handler an element registered for an event, read the instance's state and
output after any invocation, and update props after construction so tests can
observe whether the component re-renders.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any

# pylint: disable=too-few-public-methods


class EventTarget(abc.ABC):
    """Something that can receive a synthetic event."""

    @abc.abstractmethod
    def handler_for(self, event_name: str) -> Callable[..., Any] | None:
        """Return the handler registered for ``event_name``, or None."""


class MountedComponent(abc.ABC):
    """A component instance under test, as exposed by a renderer."""

    @property
    @abc.abstractmethod
    def instance(self) -> Any:
        """The underlying component instance."""

    @property
    @abc.abstractmethod
    def props(self) -> Mapping[str, Any]:
        """The current input values of the component."""

    @property
    @abc.abstractmethod
    def state(self) -> Mapping[str, Any]:
        """A read-only view of the component's current internal state."""

    @property
    @abc.abstractmethod
    def output(self) -> Any:
        """The element tree produced by the last render."""

    @abc.abstractmethod
    def set_props(self, **changes: Any) -> None:
        """Update input values and let the component decide whether to re-render."""

    @abc.abstractmethod
    def find(self, key: str) -> EventTarget:
        """Return the element with ``key`` from the last rendered output.

        Raises:
            KeyError: If no element in the output carries ``key``.
        """


class Renderer(abc.ABC):
    """Constructs component instances for tests."""

    @abc.abstractmethod
    def mount(self, component_cls: type, **props: Any) -> MountedComponent:
        """Construct ``component_cls`` with ``props`` and render it once."""
