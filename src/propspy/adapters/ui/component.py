"""Component base classes for the in-memory UI model."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .element import Element

Updater = Callable[[Mapping[str, Any], Mapping[str, Any]], None]


class Component(abc.ABC):
    """Base class for in-memory components.

    Props are read-only once constructed; state changes go through `set_state`.
    Once mounted, `set_state` hands the next state to the renderer, which decides
    (through `should_update`) whether to call `render` again.
    """

    default_props: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, **props: Any) -> None:
        self.props: Mapping[str, Any] = MappingProxyType(
            {**self.default_props, **props}
        )
        self.state: Mapping[str, Any] = MappingProxyType(dict(self.initial_state()))
        self._updater: Updater | None = None

    def initial_state(self) -> Mapping[str, Any]:
        """Return the state the component starts with."""
        return {}

    def set_state(self, **changes: Any) -> None:
        """Merge ``changes`` into the state and re-render if mounted."""
        next_state = MappingProxyType({**self.state, **changes})
        if self._updater is None:
            self.state = next_state
            return
        self._updater(self.props, next_state)

    def should_update(  # pylint: disable=unused-argument
        self, next_props: Mapping[str, Any], next_state: Mapping[str, Any]
    ) -> bool:
        """Decide whether new props or state require a render. Always true here."""
        return True

    @abc.abstractmethod
    def render(self) -> Element:
        """Produce the element tree for the current props and state."""


def _shallow_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    if a.keys() != b.keys():
        return False
    return all(a[k] is b[k] or a[k] == b[k] for k in a)


class PureComponent(Component):
    """A component that only re-renders when props or state actually change."""

    def should_update(
        self, next_props: Mapping[str, Any], next_state: Mapping[str, Any]
    ) -> bool:
        return not (
            _shallow_equal(self.props, next_props)
            and _shallow_equal(self.state, next_state)
        )
