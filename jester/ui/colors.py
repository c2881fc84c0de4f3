# jester/ui/colors.py
"""
Jester — Terminal Color System
ANSI color codes for CLI output.
"""

import os
import sys

# ═══════════════════════════════════════════════════════════════
# PALETTE
# ═══════════════════════════════════════════════════════════════

ELECTRIC_CYAN = "\033[38;5;51m"    # Headings / active labels
BRIGHT_MAGENTA = "\033[38;5;201m"  # Model names
MID_GRAY = "\033[38;5;250m"        # Muted labels
GLITCH_RED = "\033[38;5;196m"      # Errors
GLITCH_GREEN = "\033[38;5;46m"     # Success
NEON_YELLOW = "\033[38;5;226m"     # Notices

BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# ═══════════════════════════════════════════════════════════════
# SEMANTIC COLOR ROLES
# ═══════════════════════════════════════════════════════════════

ACCENT_FG = ELECTRIC_CYAN
ACCENT_ALT_FG = BRIGHT_MAGENTA
MUTED_FG = MID_GRAY
ERROR_FG = GLITCH_RED
SUCCESS_FG = GLITCH_GREEN
WARNING_FG = NEON_YELLOW


def color_enabled(stream=None) -> bool:
    """Colors only on a TTY, and never when NO_COLOR is set."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str, style: str = "", stream=None) -> str:
    """Apply color and optional style to text bound for `stream` (stdout by default)"""
    if not color_enabled(stream):
        return text
    return f"{style}{color}{text}{RESET}"
