"""Harness error definitions."""

from collections.abc import Sequence

# ============================================================================
#                           General harness errors
# ============================================================================


class HarnessError(Exception):
    """Base class for errors raised by the harness itself."""


# ============================================================================
#                       Interception related errors
# ============================================================================


class NotFoundError(HarnessError, LookupError):
    """Raised when the operation to wrap does not exist on the target.

    Attributes:
        target_name (str): Display name of the target that was searched.
        operation (str): The operation name that was requested.
        reason (str): Why the lookup failed.
    """

    def __init__(
        self, target_name: str, operation: str, reason: str = "does not exist"
    ) -> None:
        super().__init__(f"Operation '{operation}' on {target_name} {reason}.")
        self.target_name = target_name
        self.operation = operation
        self.reason = reason


class DoubleWrapError(HarnessError):
    """Raised when an operation is wrapped again before being restored."""

    def __init__(self, label: str) -> None:
        super().__init__(
            f"Operation {label} is already wrapped; restore it before wrapping again."
        )
        self.label = label


class LeakedInterceptionError(HarnessError):
    """Raised at teardown when a test left wrapped operations behind.

    The operations have already been restored when this is raised.
    """

    def __init__(self, labels: Sequence[str]) -> None:
        super().__init__(
            "Test left wrapped operations active: " + ", ".join(labels) + "."
        )
        self.labels = tuple(labels)


# ============================================================================
#                       Dispatch related errors
# ============================================================================


class NoHandlerError(HarnessError, LookupError):
    """Raised when a target has no handler registered for an event."""

    def __init__(self, target: object, event_name: str) -> None:
        super().__init__(f"No handler registered for event '{event_name}' on {target!r}.")
        self.target = target
        self.event_name = event_name


# ============================================================================
#                           Assertion errors
# ============================================================================


class ExpectationError(AssertionError):
    """Raised by the assertion helpers.

    Carries the label of the handle that produced the unexpected count or order
    so a failing test points at the right interception.
    """

    def __init__(self, label: str, message: str) -> None:
        super().__init__(f"[{label}] {message}")
        self.label = label
