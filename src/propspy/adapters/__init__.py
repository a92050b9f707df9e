"""Concrete collaborators used with the harness."""
