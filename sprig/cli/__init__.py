"""Command line interface for inspecting application contexts."""

from .app import app

__all__ = ["app"]
