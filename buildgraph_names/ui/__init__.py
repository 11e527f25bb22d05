"""Terminal output for the buildgraph CLI."""

from .error_display import display_resolution_errors
from .error_display import format_error

__all__ = ["display_resolution_errors", "format_error"]
