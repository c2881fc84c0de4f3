# jester/ui/__init__.py
"""
Jester UI Module
Terminal color helpers.
"""

from .colors import (
    ACCENT_FG,
    BOLD,
    ERROR_FG,
    MUTED_FG,
    RESET,
    SUCCESS_FG,
    WARNING_FG,
    colorize,
)

__all__ = [
    "ACCENT_FG",
    "BOLD",
    "ERROR_FG",
    "MUTED_FG",
    "RESET",
    "SUCCESS_FG",
    "WARNING_FG",
    "colorize",
]
