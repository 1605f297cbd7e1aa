"""CLI components for output formatting.

This module provides the building blocks for the CLI interface, such as the
formatter for colored output.
"""

from .output_formatter import ColoredFormatter, OutputFormatter

__all__ = [
    "ColoredFormatter",
    "OutputFormatter",
]
