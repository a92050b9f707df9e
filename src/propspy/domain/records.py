"""Records produced and consumed by the harness."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _get_pending() -> "_PendingType":
    # Factory used by pickle to retrieve the one true instance.
    return PENDING


@dataclass(frozen=True)
class _PendingType:
    """Sentinel marking a call whose wrapped operation has not returned.

    This is distinct from `None`, which is a legitimate return value.
    """

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "PENDING"

    def __reduce__(self):  # keep singleton on pickle
        return (_get_pending, ())


# Singleton instance
PENDING = _PendingType()


@dataclass(frozen=True, slots=True)
class InterceptionKey:
    """Identifies a (target definition, operation name) pair.

    The target is compared by identity, which is what matters when the same
    class or props mapping is wrapped twice.
    """

    target_id: int
    operation: str

    @classmethod
    def for_target(cls, target: object, operation: str) -> "InterceptionKey":
        """Build the key for ``operation`` on ``target``."""
        return cls(id(target), operation)


@dataclass(slots=True)
class CallRecord:
    """One recorded invocation of an observed operation.

    Attributes:
        sequence: Registry-wide sequence number, assigned when the call starts.
            Comparing sequences across handles orders calls within a test.
        index: 1-based position of this call within its own handle.
        args: Positional arguments, excluding the receiver of a method.
        kwargs: Keyword arguments.
        instance: The bound receiver (``self`` or ``cls``) for methods, else None.
        return_value: The original's result, or ``PENDING`` while it runs.
        exception: The exception raised by the original, if any.
    """

    sequence: int
    index: int
    args: tuple[Any, ...]
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    instance: Any = None
    return_value: Any = PENDING
    exception: BaseException | None = None

    @property
    def completed(self) -> bool:
        """Whether the wrapped operation has returned or raised."""
        return self.exception is not None or self.return_value is not PENDING

    @property
    def raised(self) -> bool:
        """Whether the wrapped operation raised."""
        return self.exception is not None

    def describe(self) -> str:
        """Return a one-line description used in assertion messages."""
        parts = [repr(a) for a in self.args]
        parts.extend(f"{k}={v!r}" for k, v in self.kwargs.items())
        outcome = (
            f"raised {type(self.exception).__name__}"
            if self.exception is not None
            else f"-> {self.return_value!r}"
        )
        return f"#{self.sequence} ({', '.join(parts)}) {outcome}"


@dataclass(frozen=True, slots=True)
class SyntheticEvent:
    """A programmatically constructed event.

    The payload is opaque and delivered by identity; the dispatcher never copies,
    validates or mutates it.
    """

    name: str
    payload: Mapping[str, Any]
    target: Any
