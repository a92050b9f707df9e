"""Assertion helpers over observable handles.

Failures raise `ExpectationError`, whose message names the handle and lists
what it recorded, rather than a bare boolean mismatch.
"""

from typing import Any

from propspy.domain.errors import ExpectationError
from propspy.service_layer.registry import ObservableHandle


def describe_calls(handle: ObservableHandle) -> str:
    """Return a multi-line listing of the calls recorded by ``handle``."""
    if not handle.calls:
        return "no calls recorded"
    return "\n".join("  " + record.describe() for record in handle.calls)


def _fail(handle: ObservableHandle, message: str) -> ExpectationError:
    return ExpectationError(handle.label, f"{message}\n{describe_calls(handle)}")


def assert_called_times(handle: ObservableHandle, expected: int) -> None:
    """Assert that ``handle`` recorded exactly ``expected`` calls."""
    if handle.call_count != expected:
        raise _fail(
            handle, f"expected {expected} call(s), recorded {handle.call_count}"
        )


def assert_called_once(handle: ObservableHandle) -> None:
    """Assert that ``handle`` recorded exactly one call."""
    assert_called_times(handle, 1)


def assert_not_called(handle: ObservableHandle) -> None:
    """Assert that ``handle`` recorded no calls."""
    assert_called_times(handle, 0)


def assert_called_with(handle: ObservableHandle, *args: Any, **kwargs: Any) -> None:
    """Assert that the last call of ``handle`` received exactly these arguments."""
    last = handle.last_call
    if last is None:
        raise _fail(handle, "expected a call, none recorded")
    if tuple(last.args) != args or dict(last.kwargs) != kwargs:
        raise _fail(
            handle,
            f"last call arguments differ; expected args={args!r} kwargs={kwargs!r}",
        )


def assert_called_before(first: ObservableHandle, second: ObservableHandle) -> None:
    """Assert that ``first`` was called, and before ``second`` was first called.

    Both handles must come from the same registry, since the comparison uses the
    registry-wide sequence numbers.
    """
    if not first.calls:
        raise _fail(first, f"expected a call before {second.label}, none recorded")
    if not second.calls:
        raise _fail(second, f"expected a call after {first.label}, none recorded")
    if first.calls[0].sequence >= second.calls[0].sequence:
        raise ExpectationError(
            first.label,
            f"expected first call before {second.label} "
            f"(#{first.calls[0].sequence} vs #{second.calls[0].sequence})",
        )
