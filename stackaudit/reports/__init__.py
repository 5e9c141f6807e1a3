"""Report rendering (console and JSON)."""

from .generator import ReportGenerator

__all__ = ["ReportGenerator"]
