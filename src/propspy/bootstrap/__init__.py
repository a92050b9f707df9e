"""Bootstrap (composition root) for PROPSPY.

Assembles a `Harness` from the interception registry, the synthetic event
dispatcher and a renderer for the UI collaborator.

Import rules:
- The pytest plugin imports *this* package.
- This package may import: `propspy.adapters`, `propspy.service_layer`,
  `propspy.interfaces`, `propspy.domain`, and `propspy.config`.
- Inner layers must not import `propspy.bootstrap`.
"""

from .bootstrap import Harness, bootstrap

__all__ = ["Harness", "bootstrap"]
