"""Global pytest fixtures for PROPSPY."""

pytest_plugins = [
    "pytester",
    "propspy.pytest_plugin",
    "tests.fixtures.components",
]
