"""
Utility module for Resolution Lab.

Contains helper functions for human-readable output.
"""

from .formatting import (
    format_file_size,
    format_frequency,
    format_db,
    format_duration,
    format_sample_rate,
    format_channels,
)

__all__ = [
    "format_file_size",
    "format_frequency",
    "format_db",
    "format_duration",
    "format_sample_rate",
    "format_channels",
]
