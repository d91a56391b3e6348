"""API route modules."""

from . import ask, navigate, tabs

__all__ = ["ask", "navigate", "tabs"]
