"""Pytest fixtures for renderer contract tests.

Provided fixtures
-----------------
- **ui_renderer**: Parametrized factory that returns a fresh `Renderer` per
  test. Currently supports `"shallow"`. To exercise another renderer, add its
  key to the `params` list and branch in the fixture body.
"""

from __future__ import annotations

import pytest

from propspy.adapters.ui import ShallowRenderer
from propspy.interfaces.ui import Renderer


@pytest.fixture(params=["shallow"])
def ui_renderer(request: pytest.FixtureRequest) -> Renderer:
    """Return a fresh renderer for the requested implementation."""
    match request.param:
        case "shallow":
            return ShallowRenderer()
        case _:
            raise ValueError(f"unknown renderer type: {request.param}")
