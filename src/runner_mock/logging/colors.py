"""ANSI color codes for console log output.

Usage:
    from runner_mock.logging.colors import CYAN, RESET

    print(f"{CYAN}listening{RESET}")
"""

RESET = "\033[0m"

RED = "\033[38;5;196m"  # errors
YELLOW = "\033[38;5;226m"  # warnings, auth failures
LIGHT_BLUE = "\033[38;5;153m"  # debug
CYAN = "\033[38;5;51m"  # info
MAGENTA = "\033[38;5;201m"  # component names

LEVEL_COLORS = {
    "DEBUG": LIGHT_BLUE,
    "INFO": CYAN,
    "WARNING": YELLOW,
    "ERROR": RED,
    "CRITICAL": RED,
}

__all__ = [
    "RESET",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
    "LEVEL_COLORS",
]
