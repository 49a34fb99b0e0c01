"""Root configuration of the demo application."""

from ..decorators import component_scan


@component_scan
class DemoConfig:
    """Scans the ``sprig.demo`` package."""
