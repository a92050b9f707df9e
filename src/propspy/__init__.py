"""PROPSPY

A call-interception and synthetic-event harness for unit-testing UI components.
It observes indirect, intra-component invocations (a method calling a
caller-supplied callback) and delivers fully-formed event payloads to element
handlers in one step.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
