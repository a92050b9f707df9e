"""Read access to a mounted component after interception and dispatch."""

from collections.abc import Mapping
from typing import Any

from propspy.interfaces.ui import EventTarget, MountedComponent


def current_state(mounted: MountedComponent) -> Mapping[str, Any]:
    """Return the component's current internal state."""
    return mounted.state


def last_output(mounted: MountedComponent) -> Any:
    """Return the element tree of the component's last render."""
    return mounted.output


def find_element(mounted: MountedComponent, key: str) -> EventTarget:
    """Return the element with ``key`` in the component's last render.

    Raises:
        KeyError: If the last render has no such element.
    """
    return mounted.find(key)
