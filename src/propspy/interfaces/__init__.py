"""Contracts the harness expects from its collaborators."""

from .ui import EventTarget, MountedComponent, Renderer

__all__ = ["EventTarget", "MountedComponent", "Renderer"]
