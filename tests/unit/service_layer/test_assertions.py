"""Unit tests for the assertion helpers."""

import pytest

from propspy.domain.errors import ExpectationError
from propspy.service_layer import assertions

# pylint: disable=too-few-public-methods


class Door:
    """Opening the door rings the bell."""

    def open(self) -> str:
        """Open the door, then ring."""
        self.ring("open")
        return "opened"

    def ring(self, reason: str, *, loud: bool = False) -> None:
        """Ring the bell."""


class TestCallCountAssertions:
    """assert_called_times and friends."""

    @staticmethod
    def test_passes_on_expected_count(spy_registry):
        """Matching counts pass silently."""
        handle = spy_registry.wrap(Door, "ring")
        assertions.assert_not_called(handle)
        Door().ring("test")
        assertions.assert_called_once(handle)
        assertions.assert_called_times(handle, 1)

    @staticmethod
    def test_failure_names_handle_and_lists_calls(spy_registry):
        """A mismatch names the handle and shows what was recorded."""
        handle = spy_registry.wrap(Door, "ring")
        door = Door()
        door.ring("a")
        door.ring("b", loud=True)

        with pytest.raises(ExpectationError) as e:
            assertions.assert_called_once(handle)

        assert e.value.label == "Door.ring"
        assert str(e.value) == (
            "[Door.ring] expected 1 call(s), recorded 2\n"
            "  #1 ('a') -> None\n"
            "  #2 ('b', loud=True) -> None"
        )

    @staticmethod
    def test_failure_without_calls(spy_registry):
        """A handle with no calls says so."""
        handle = spy_registry.wrap(Door, "ring")
        with pytest.raises(ExpectationError, match="no calls recorded"):
            assertions.assert_called_once(handle)


class TestCalledWith:
    """assert_called_with checks the last call."""

    @staticmethod
    def test_matching_arguments(spy_registry):
        """Matching positional and keyword arguments pass."""
        handle = spy_registry.wrap(Door, "ring")
        Door().ring("visitor", loud=True)
        assertions.assert_called_with(handle, "visitor", loud=True)

    @staticmethod
    def test_mismatched_arguments(spy_registry):
        """Different arguments fail with the expected values in the message."""
        handle = spy_registry.wrap(Door, "ring")
        Door().ring("visitor")
        with pytest.raises(ExpectationError, match="last call arguments differ"):
            assertions.assert_called_with(handle, "postman")

    @staticmethod
    def test_no_call(spy_registry):
        """A handle with no calls fails."""
        handle = spy_registry.wrap(Door, "ring")
        with pytest.raises(ExpectationError, match="expected a call, none recorded"):
            assertions.assert_called_with(handle, "visitor")


class TestCalledBefore:
    """assert_called_before establishes a causal chain."""

    @staticmethod
    def test_method_before_callback(spy_registry):
        """The outer method is recorded before the operation it calls."""
        opened = spy_registry.wrap(Door, "open")
        rang = spy_registry.wrap(Door, "ring")
        Door().open()
        assertions.assert_called_before(opened, rang)

    @staticmethod
    def test_wrong_order(spy_registry):
        """Reversing the handles fails and names both sequence numbers."""
        opened = spy_registry.wrap(Door, "open")
        rang = spy_registry.wrap(Door, "ring")
        Door().open()
        with pytest.raises(ExpectationError) as e:
            assertions.assert_called_before(rang, opened)
        assert e.value.label == "Door.ring"
        assert "(#2 vs #1)" in str(e.value)

    @staticmethod
    def test_second_never_called(spy_registry):
        """If the later handle never ran, the failure names it."""
        opened = spy_registry.wrap(Door, "open")
        rang = spy_registry.wrap(Door, "ring")
        Door().ring("only")
        with pytest.raises(ExpectationError) as e:
            assertions.assert_called_before(rang, opened)
        assert e.value.label == "Door.open"

    @staticmethod
    def test_first_never_called(spy_registry):
        """If the earlier handle never ran, the failure names it."""
        opened = spy_registry.wrap(Door, "open")
        rang = spy_registry.wrap(Door, "ring")
        with pytest.raises(ExpectationError) as e:
            assertions.assert_called_before(opened, rang)
        assert e.value.label == "Door.open"


def test_describe_calls_empty(spy_registry):
    """describe_calls reports an empty handle."""
    handle = spy_registry.wrap(Door, "ring")
    assert assertions.describe_calls(handle) == "no calls recorded"
