"""Synthetic event dispatcher.

Delivers a fully-formed payload to the handler a target registered for an
event, instead of assembling that payload through a sequence of lower-level
events. This assumes the handler is value-driven (it reads the final value out
of the payload). Handlers that depend on intermediate deltas need one dispatch
per delta, which `SyntheticEventDispatcher.dispatch_each` provides.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from propspy.domain.errors import NoHandlerError
from propspy.domain.records import SyntheticEvent

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class SyntheticEventDispatcher:
    """Routes synthetic events to the handlers registered on their targets.

    Dispatch is synchronous: the handler runs inline on the calling thread and
    any exception it raises reaches the caller unmodified. `Exception`
    subclasses are logged first; `BaseException` subclasses such as
    `KeyboardInterrupt` or pytest outcomes (`pytest.fail`, `pytest.skip`) pass
    through unlogged. The payload is opaque and passed by identity.
    """

    def dispatch(
        self, target: Any, event_name: str, payload: Mapping[str, Any]
    ) -> None:
        """Deliver ``payload`` to the handler ``target`` registered for ``event_name``.

        Args:
            target: An `EventTarget` (anything with a ``handler_for`` method).
            event_name: The event name, e.g. ``"change"``.
            payload: The event payload, delivered as-is.

        Raises:
            NoHandlerError: If ``target`` has no handler for ``event_name``.
            Exception: Whatever the handler raises.
        """
        self.dispatch_event(SyntheticEvent(event_name, payload, target))

    def dispatch_event(self, event: SyntheticEvent) -> None:
        """Deliver a pre-built event. See `dispatch`."""
        handler = self._resolve(event)
        handler_name = self._get_handler_name(handler)
        logger.debug(
            "Dispatching %s to %r with handler %s",
            event.name,
            event.target,
            handler_name,
        )
        try:
            handler(event.payload)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Exception dispatching %s to %r with handler %s",
                event.name,
                event.target,
                handler_name,
            )
            raise

    def dispatch_each(
        self, target: Any, event_name: str, payloads: Iterable[Mapping[str, Any]]
    ) -> int:
        """Dispatch one event per payload, in order.

        Stops at the first failure.

        Returns:
            The number of events delivered.
        """
        delivered = 0
        for payload in payloads:
            self.dispatch(target, event_name, payload)
            delivered += 1
        return delivered

    @staticmethod
    def _resolve(event: SyntheticEvent) -> Callable[..., Any]:
        handler_for = getattr(event.target, "handler_for", None)
        handler = handler_for(event.name) if handler_for is not None else None
        if handler is None:
            logger.error("No handler for event %s on %r", event.name, event.target)
            raise NoHandlerError(event.target, event.name)
        return handler

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__qualname__"):
            return fn.__qualname__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
