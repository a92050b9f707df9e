"""Bootstrap a harness with a registry, a dispatcher and a renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from propspy.adapters.ui import ShallowRenderer
from propspy.interfaces.ui import MountedComponent, Renderer
from propspy.service_layer.dispatcher import SyntheticEventDispatcher
from propspy.service_layer.registry import InterceptionRegistry, ObservableHandle


@dataclass(frozen=True)
class Harness:
    """The pieces a test scenario composes.

    The registry observes operations before an event is dispatched, the
    dispatcher fires the event, and the renderer gives access to the component
    state and output that assertions read afterwards.
    """

    registry: InterceptionRegistry
    dispatcher: SyntheticEventDispatcher
    renderer: Renderer

    def wrap(self, target: Any, operation: str, **kwargs: Any) -> ObservableHandle:
        """Shortcut for `InterceptionRegistry.wrap`."""
        return self.registry.wrap(target, operation, **kwargs)

    def dispatch(self, target: Any, event_name: str, payload: Any) -> None:
        """Shortcut for `SyntheticEventDispatcher.dispatch`."""
        self.dispatcher.dispatch(target, event_name, payload)

    def mount(self, component_cls: type, **props: Any) -> MountedComponent:
        """Shortcut for `Renderer.mount`."""
        return self.renderer.mount(component_cls, **props)


def bootstrap(
    registry: InterceptionRegistry | None = None,
    dispatcher: SyntheticEventDispatcher | None = None,
    renderer: Renderer | None = None,
) -> Harness:
    """Build a harness, creating any piece that is not supplied."""
    return Harness(
        registry=registry if registry is not None else InterceptionRegistry(),
        dispatcher=dispatcher if dispatcher is not None else SyntheticEventDispatcher(),
        renderer=renderer if renderer is not None else ShallowRenderer(),
    )
