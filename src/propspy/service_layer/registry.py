"""Interception registry.

Wraps a named operation so each invocation is recorded while the original still
runs. Targets can be classes (component definitions), instances, modules, or
mutable mappings such as a props dict holding a caller-supplied callback.

Observing the method rather than the callback is what makes indirect calls
visible: a callback invoked inside another method is only seen by a test that
wraps the slot the method reads it from.
"""

from __future__ import annotations

import functools
import inspect
import itertools
import logging
import weakref
from collections.abc import Callable, Mapping, MutableMapping
from types import ModuleType
from typing import Any

from propspy.domain.errors import DoubleWrapError, NotFoundError
from propspy.domain.records import CallRecord, InterceptionKey

logger = logging.getLogger(__name__)

WRAPPER_MARK = "__propspy_handle__"

_LIVE_REGISTRIES: weakref.WeakSet[InterceptionRegistry] = weakref.WeakSet()


# ============================================================================
#                           Slots
# ============================================================================


class _AttributeSlot:
    """An operation stored as an attribute of a class, instance or module."""

    def __init__(self, target: Any, name: str, raw: Any, owned: bool) -> None:
        self.target = target
        self.name = name
        self.raw = raw
        self.owned = owned

    @property
    def label(self) -> str:
        if inspect.isclass(self.target):
            return f"{self.target.__qualname__}.{self.name}"
        if isinstance(self.target, ModuleType):
            return f"{self.target.__name__}.{self.name}"
        return f"{type(self.target).__qualname__}().{self.name}"

    def install(self, value: Any) -> None:
        try:
            setattr(self.target, self.name, value)
        except (AttributeError, TypeError) as e:
            raise NotFoundError(
                _describe(self.target), self.name, "cannot be replaced"
            ) from e

    def reset(self) -> None:
        if self.owned:
            setattr(self.target, self.name, self.raw)
        else:
            delattr(self.target, self.name)


class _MappingSlot:
    """An operation stored under a key of a mutable mapping."""

    def __init__(self, target: MutableMapping[str, Any], name: str) -> None:
        self.target = target
        self.name = name
        self.raw = target[name]
        self.owned = True

    @property
    def label(self) -> str:
        return f"{type(self.target).__name__}[{self.name!r}]"

    def install(self, value: Any) -> None:
        self.target[self.name] = value

    def reset(self) -> None:
        self.target[self.name] = self.raw


_Slot = _AttributeSlot | _MappingSlot


def _describe(target: Any) -> str:
    if inspect.isclass(target):
        return target.__qualname__
    if isinstance(target, ModuleType):
        return f"module {target.__name__}"
    return f"{type(target).__qualname__} instance"


def _resolve_slot(target: Any, name: str) -> _Slot:
    if isinstance(target, Mapping):
        if not isinstance(target, MutableMapping):
            raise NotFoundError(
                _describe(target), name, "is held in a read-only mapping"
            )
        if name not in target:
            raise NotFoundError(_describe(target), name)
        return _MappingSlot(target, name)
    try:
        raw = inspect.getattr_static(target, name)
    except AttributeError as e:
        raise NotFoundError(_describe(target), name) from e
    owned = name in getattr(target, "__dict__", {})
    return _AttributeSlot(target, name, raw, owned)


def _is_wrapper(obj: Any) -> bool:
    if isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    return hasattr(obj, WRAPPER_MARK)


# ============================================================================
#                           Handles
# ============================================================================


class ObservableHandle:
    """Observation of one wrapped operation.

    Handles keep their records after `restore`, so assertions can run after
    the operation has been put back. Use a handle as a context manager to
    restore on every exit path.
    """

    def __init__(
        self,
        registry: InterceptionRegistry,
        key: InterceptionKey,
        label: str,
        slot: _Slot,
    ) -> None:
        self._registry = registry
        self._slot = slot
        self._calls: list[CallRecord] = []
        self._active = True
        self.key = key
        self.label = label

    @property
    def target(self) -> Any:
        """The class, instance, module or mapping the operation lives on."""
        return self._slot.target

    @property
    def operation(self) -> str:
        """The wrapped operation name."""
        return self._slot.name

    @property
    def active(self) -> bool:
        """Whether the operation is currently wrapped."""
        return self._active

    @property
    def call_count(self) -> int:
        """Number of recorded invocations."""
        return len(self._calls)

    @property
    def calls(self) -> tuple[CallRecord, ...]:
        """Recorded invocations in call order."""
        return tuple(self._calls)

    @property
    def last_call(self) -> CallRecord | None:
        """The most recent invocation, or None if there was none."""
        return self._calls[-1] if self._calls else None

    def restore(self) -> None:
        """Put the original operation back. Restoring twice is a no-op."""
        self._registry.restore(self)

    def observe(
        self,
        invoke: Callable[[], Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Record one call, then run ``invoke`` and return its result unchanged.

        The record is appended before the original runs, so a callback invoked
        from inside the operation gets a later sequence number.
        """
        if not self._active:
            return invoke()
        record = CallRecord(
            sequence=self._registry.next_sequence(),
            index=len(self._calls) + 1,
            args=args,
            kwargs=kwargs,
            instance=instance,
        )
        self._calls.append(record)
        try:
            result = invoke()
        except BaseException as exc:
            record.exception = exc
            raise
        record.return_value = result
        return result

    def _deactivate(self) -> None:
        self._slot.reset()
        self._active = False

    def __enter__(self) -> ObservableHandle:
        return self

    def __exit__(self, *args) -> None:
        self.restore()

    def __repr__(self) -> str:
        state = "active" if self._active else "restored"
        return f"<ObservableHandle {self.label} {state} calls={self.call_count}>"


def _build_wrapper(slot: _Slot, handle: ObservableHandle) -> Any:
    """Build the replacement installed into ``slot``."""
    raw = slot.raw

    if isinstance(slot, _AttributeSlot) and inspect.isclass(slot.target):
        if isinstance(raw, staticmethod):
            func = raw.__func__

            @functools.wraps(func)
            def static_wrapper(*args, **kwargs):
                return handle.observe(lambda: func(*args, **kwargs), None, args, kwargs)

            setattr(static_wrapper, WRAPPER_MARK, handle)
            return staticmethod(static_wrapper)

        if isinstance(raw, classmethod):
            func = raw.__func__

            @functools.wraps(func)
            def class_wrapper(cls, *args, **kwargs):
                return handle.observe(
                    lambda: func(cls, *args, **kwargs), cls, args, kwargs
                )

            setattr(class_wrapper, WRAPPER_MARK, handle)
            return classmethod(class_wrapper)

        if inspect.isfunction(raw):

            @functools.wraps(raw)
            def method_wrapper(self, *args, **kwargs):
                return handle.observe(
                    lambda: raw(self, *args, **kwargs), self, args, kwargs
                )

            setattr(method_wrapper, WRAPPER_MARK, handle)
            return method_wrapper

        if hasattr(type(raw), "__get__"):
            return _DescriptorWrapper(raw, handle)

        # Callables without __get__ do not bind; keep it that way.
        return staticmethod(_plain_wrapper(raw, handle, None))

    if isinstance(slot, _AttributeSlot) and not slot.owned:
        # Reached through the instance's class: delegate to the bound attribute.
        bound = getattr(slot.target, slot.name)
        return _plain_wrapper(bound, handle, getattr(bound, "__self__", None))

    return _plain_wrapper(raw, handle, None)


def _plain_wrapper(func: Callable[..., Any], handle: ObservableHandle, instance: Any):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return handle.observe(lambda: func(*args, **kwargs), instance, args, kwargs)

    setattr(wrapper, WRAPPER_MARK, handle)
    return wrapper


class _DescriptorWrapper:
    """Stands in for a method descriptor that is not a plain function.

    Covers ``functools.lru_cache`` methods, ``functools.partialmethod``, builtin
    method descriptors inherited from types such as ``str`` and class-based
    decorators. The original is bound through its own ``__get__`` on every
    access, so the receiver it sees is unchanged.
    """

    def __init__(self, raw: Any, handle: ObservableHandle) -> None:
        self._raw = raw
        self._handle = handle
        setattr(self, WRAPPER_MARK, handle)
        self.__doc__ = getattr(raw, "__doc__", None)

    def __get__(self, obj: Any, owner: type | None = None) -> Callable[..., Any]:
        bound = self._raw.__get__(obj, owner)
        return _plain_wrapper(bound, self._handle, obj)


def _is_operation(raw: Any) -> bool:
    return callable(raw) or isinstance(
        raw, (staticmethod, classmethod, functools.partialmethod, _DescriptorWrapper)
    )


# ============================================================================
#                           Registry
# ============================================================================


class InterceptionRegistry:
    """Creates and tracks the wrapped operations of one test.

    Sequence numbers are shared by every handle of a registry, so comparing
    them across handles establishes the order of calls within a test.

    A registry is a context manager; leaving it restores every active handle.
    """

    def __init__(self) -> None:
        self._handles: dict[InterceptionKey, ObservableHandle] = {}
        self._sequence = itertools.count(1)
        _LIVE_REGISTRIES.add(self)

    def next_sequence(self) -> int:
        """Allocate the next sequence number."""
        return next(self._sequence)

    def wrap(
        self, target: Any, operation: str, *, label: str | None = None
    ) -> ObservableHandle:
        """Wrap ``operation`` on ``target`` so its invocations are recorded.

        Args:
            target: A class, instance, module or mutable mapping.
            operation: Name of the attribute (or key) holding the operation.
            label: Display name used in logs and assertion messages. Defaults
                to e.g. ``"Toggle.toggle"`` or ``"dict['on_toggle']"``.

        Returns:
            The handle exposing the recorded calls.

        Raises:
            NotFoundError: If ``operation`` is absent from ``target`` or is not
                callable.
            DoubleWrapError: If the operation is already wrapped and has not been
                restored, by this or any other registry.
        """
        slot = _resolve_slot(target, operation)
        label = label or slot.label
        if not _is_operation(slot.raw):
            raise NotFoundError(_describe(target), operation, "is not callable")

        key = InterceptionKey.for_target(target, operation)
        if key in self._handles or (slot.owned and _is_wrapper(slot.raw)):
            logger.error("Refusing to wrap %s twice", label)
            raise DoubleWrapError(label)

        handle = ObservableHandle(self, key, label, slot)
        slot.install(_build_wrapper(slot, handle))
        self._handles[key] = handle
        logger.debug("Wrapped %s", label)
        return handle

    def restore(self, handle: ObservableHandle) -> None:
        """Put the original operation of ``handle`` back.

        Restoring an already restored handle is a no-op.
        """
        if not handle.active:
            logger.debug("Handle %s already restored", handle.label)
            return
        handle._deactivate()  # pylint: disable=protected-access
        if self._handles.get(handle.key) is handle:
            del self._handles[handle.key]
        logger.debug("Restored %s after %d call(s)", handle.label, handle.call_count)

    def restore_all(self) -> list[ObservableHandle]:
        """Restore every active handle, most recent first.

        Returns:
            The handles that were still active, in the order they were restored.
        """
        restored = list(reversed(self._handles.values()))
        for handle in restored:
            self.restore(handle)
        return restored

    @property
    def active_handles(self) -> tuple[ObservableHandle, ...]:
        """Currently wrapped handles, in wrap order."""
        return tuple(self._handles.values())

    def is_wrapped(self, target: Any, operation: str) -> bool:
        """Whether this registry currently wraps ``operation`` on ``target``."""
        return InterceptionKey.for_target(target, operation) in self._handles

    def __enter__(self) -> InterceptionRegistry:
        return self

    def __exit__(self, *args) -> None:
        self.restore_all()


def live_registries() -> tuple[InterceptionRegistry, ...]:
    """Registries that currently hold active handles, in any test."""
    return tuple(registry for registry in _LIVE_REGISTRIES if registry.active_handles)
