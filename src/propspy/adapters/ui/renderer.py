"""Shallow renderer for in-memory components."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from propspy.interfaces.ui import MountedComponent, Renderer

from .component import Component
from .element import Element

logger = logging.getLogger(__name__)


class ShallowMount(MountedComponent):
    """A mounted component and the output of its last render.

    Methods are looked up on the instance whenever they run, so operations
    wrapped on the component class before mounting are observed. Handlers bound
    into an element during a render keep pointing at whatever was installed at
    that time; wrapping afterwards only takes effect from the next render.
    """

    def __init__(self, instance: Component) -> None:
        self._instance = instance
        self._output: Element = instance.render()
        instance._updater = self._update  # pylint: disable=protected-access

    @property
    def instance(self) -> Component:
        return self._instance

    @property
    def props(self) -> Mapping[str, Any]:
        return self._instance.props

    @property
    def state(self) -> Mapping[str, Any]:
        return self._instance.state

    @property
    def output(self) -> Element:
        return self._output

    def set_props(self, **changes: Any) -> None:
        next_props = MappingProxyType({**self._instance.props, **changes})
        self._update(next_props, self._instance.state)

    def find(self, key: str) -> Element:
        for element in self._output.walk():
            if element.key == key:
                return element
        raise KeyError(key)

    def _update(self, next_props: Mapping[str, Any], next_state: Mapping[str, Any]) -> None:
        instance = self._instance
        render = instance.should_update(next_props, next_state)
        instance.props = next_props
        instance.state = next_state
        if render:
            self._output = instance.render()
        else:
            logger.debug("Skipped render of %s", type(instance).__name__)


class ShallowRenderer(Renderer):
    """Mounts components one level deep; child components are never instantiated."""

    def mount(self, component_cls: type[Component], **props: Any) -> ShallowMount:
        logger.debug("Mounting %s with props %s", component_cls.__name__, sorted(props))
        return ShallowMount(component_cls(**props))
