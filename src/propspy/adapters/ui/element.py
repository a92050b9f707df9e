"""Element trees produced by in-memory components."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from propspy.interfaces.ui import EventTarget

HANDLER_PREFIX = "on_"


class Element(EventTarget):
    """A rendered element.

    Event handlers are ordinary props named ``on_<event>``; ``on_change`` is the
    handler for the ``change`` event.

    Args:
        tag: Element type, e.g. ``"button"`` or ``"input"``.
        *children: Nested elements or text.
        key: Optional identifier used by `ShallowMount.find`.
        **props: Attributes and event handlers.
    """

    def __init__(
        self, tag: str, *children: Element | str, key: str | None = None, **props: Any
    ) -> None:
        self.tag = tag
        self.key = key
        self.children = tuple(children)
        self.props = props

    def handler_for(self, event_name: str) -> Callable[..., Any] | None:
        handler = self.props.get(HANDLER_PREFIX + event_name)
        return handler if callable(handler) else None

    def walk(self) -> Iterator[Element]:
        """Yield this element and every nested element, depth first."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.walk()

    @property
    def text(self) -> str:
        """Concatenated text content of this element and its descendants."""
        return "".join(
            child.text if isinstance(child, Element) else str(child)
            for child in self.children
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return (self.tag, self.key, self.children, self.props) == (
            other.tag,
            other.key,
            other.children,
            other.props,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        key = f" key={self.key!r}" if self.key is not None else ""
        return f"<{self.tag}{key}>"
