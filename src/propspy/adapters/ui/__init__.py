"""In-memory component model used to exercise the harness.

This is a deliberately small stand-in for a UI framework: components hold props
and state, render element trees, and re-render through a shallow renderer.
"""

from .component import Component, PureComponent
from .element import Element
from .renderer import ShallowMount, ShallowRenderer

__all__ = [
    "Component",
    "Element",
    "PureComponent",
    "ShallowMount",
    "ShallowRenderer",
]
