"""pytest integration for PROPSPY.

Enable it from a ``conftest.py``::

    pytest_plugins = ["propspy.pytest_plugin"]

Fixtures
- ``spy_registry``: a fresh `InterceptionRegistry`, restored at teardown.
- ``event_dispatcher``: a `SyntheticEventDispatcher`.
- ``harness``: a `Harness` sharing ``spy_registry``.

After every test, handles still active on any registry (for instance one a
test built by hand and never restored) are restored before the next test
runs, and the leak policy decides whether that is silent, a warning or a
teardown error.

Options
- ``--propspy-leak-policy`` / ini ``propspy_leak_policy``: ``ignore``, ``warn``
  or ``error``; falls back to ``PROPSPY_LEAK_POLICY``.
- ``--propspy-debug``: print harness logs at DEBUG through Rich.
- ``--propspy-log-path``: keep a flight recorder of harness logs, written to
  this file when a warning is logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from propspy import __version__
from propspy import config as propspy_config
from propspy.bootstrap import Harness, bootstrap
from propspy.domain.errors import LeakedInterceptionError
from propspy.logging import (
    attach_handlers,
    config_console_handler,
    config_flight_recorder,
    detach_handlers,
    log_startup,
)
from propspy.service_layer.dispatcher import SyntheticEventDispatcher
from propspy.service_layer.registry import (
    InterceptionRegistry,
    ObservableHandle,
    live_registries,
)

logger = logging.getLogger(__name__)

LEAK_POLICY_INI = "propspy_leak_policy"
_HANDLERS_KEY = pytest.StashKey[list[logging.Handler]]()
_LEAK_POLICY_KEY = pytest.StashKey[propspy_config.LeakPolicy]()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register the plugin's command-line and ini options."""
    group = parser.getgroup("propspy", "call interception harness")
    group.addoption(
        "--propspy-leak-policy",
        dest="propspy_leak_policy",
        choices=[p.value for p in propspy_config.LeakPolicy],
        default=None,
        help="What to do with operations left wrapped at teardown.",
    )
    group.addoption(
        "--propspy-debug",
        dest="propspy_debug",
        action="store_true",
        default=False,
        help="Print harness logs at DEBUG level.",
    )
    group.addoption(
        "--propspy-log-path",
        dest="propspy_log_path",
        default=None,
        help="Write buffered harness logs to this file when a warning occurs.",
    )
    parser.addini(
        LEAK_POLICY_INI,
        help="Default for --propspy-leak-policy (ignore, warn or error).",
        default=None,
    )


def resolve_leak_policy(pytest_config: pytest.Config) -> propspy_config.LeakPolicy:
    """Pick the leak policy: command line, then ini, then environment."""
    if value := pytest_config.getoption("propspy_leak_policy"):
        return propspy_config.parse_leak_policy(value)
    if value := pytest_config.getini(LEAK_POLICY_INI):
        return propspy_config.parse_leak_policy(value)
    return propspy_config.get_leak_policy()


def pytest_configure(config: pytest.Config) -> None:
    """Resolve settings and attach logging handlers."""
    leak_policy = resolve_leak_policy(config)
    config.stash[_LEAK_POLICY_KEY] = leak_policy

    handlers: list[logging.Handler] = []
    debug = config.getoption("propspy_debug")
    level = propspy_config.get_log_level()
    if debug or level is not None:
        handlers.append(
            config_console_handler(level=level or logging.WARNING, debug_mode=debug)
        )
    log_path = config.getoption("propspy_log_path")
    if log_path:
        handlers.append(config_flight_recorder(Path(log_path)))
    config.stash[_HANDLERS_KEY] = handlers

    if handlers:
        attach_handlers(handlers)
        log_startup(
            logger,
            app_version=__version__,
            handlers=handlers,
            log_path=Path(log_path) if log_path else None,
            leak_policy=leak_policy,
        )


def pytest_unconfigure(config: pytest.Config) -> None:
    """Detach and close the handlers attached in `pytest_configure`."""
    detach_handlers(config.stash.get(_HANDLERS_KEY, []))


def apply_leak_policy(
    leaked: Sequence[ObservableHandle],
    policy: propspy_config.LeakPolicy,
    nodeid: str,
    *,
    raise_error: bool = True,
) -> None:
    """Report handles a test left active, which have already been restored.

    Args:
        leaked: The restored handles.
        policy: How to report them.
        nodeid: The test that left them active.
        raise_error: When False, the ``error`` policy only logs. Used when
            teardown is already failing, so the original error is reported.

    Raises:
        LeakedInterceptionError: Under the ``error`` policy, if any leaked.
    """
    if not leaked:
        return
    labels = [handle.label for handle in leaked]
    match policy:
        case propspy_config.LeakPolicy.IGNORE:
            logger.debug("Restored %s left wrapped by %s", labels, nodeid)
        case propspy_config.LeakPolicy.WARN:
            logger.warning(
                "Test %s left operations wrapped; restored: %s",
                nodeid,
                ", ".join(labels),
            )
        case propspy_config.LeakPolicy.ERROR:
            logger.error("Test %s left operations wrapped: %s", nodeid, labels)
            if raise_error:
                raise LeakedInterceptionError(labels)


def _restore_leaked(item: pytest.Item, *, raise_error: bool) -> None:
    leaked = [
        handle for registry in live_registries() for handle in registry.restore_all()
    ]
    policy = item.config.stash.get(
        _LEAK_POLICY_KEY, propspy_config.DEFAULT_LEAK_POLICY
    )
    apply_leak_policy(leaked, policy, item.nodeid, raise_error=raise_error)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_teardown(item: pytest.Item):
    """After fixtures are torn down, restore anything a test left wrapped.

    Restoring also happens when a fixture teardown fails; that failure is then
    the one reported, and the leak is only logged.
    """
    try:
        result = yield
    except BaseException:
        _restore_leaked(item, raise_error=False)
        raise
    _restore_leaked(item, raise_error=True)
    return result


@pytest.fixture
def spy_registry() -> Iterator[InterceptionRegistry]:
    """A fresh interception registry, restored at teardown."""
    registry = InterceptionRegistry()
    yield registry
    if restored := registry.restore_all():
        logger.debug("Fixture restored %d handle(s)", len(restored))


@pytest.fixture
def event_dispatcher() -> SyntheticEventDispatcher:
    """A synthetic event dispatcher."""
    return SyntheticEventDispatcher()


@pytest.fixture
def harness(  # pylint: disable=redefined-outer-name
    spy_registry: InterceptionRegistry, event_dispatcher: SyntheticEventDispatcher
) -> Harness:
    """A harness whose registry is restored at teardown."""
    return bootstrap(registry=spy_registry, dispatcher=event_dispatcher)
