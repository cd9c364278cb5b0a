"""
Exit codes for Pomodoro CLI.

Semantic exit codes so that wrapper scripts can tell a bad flag apart
from a broken terminal.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or configuration (bad duration, bad format string)
ERROR_INVALID_ARGS = 2

# Terminal could not be put into (or restored from) raw input mode
ERROR_TERMINAL = 7


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_TERMINAL: "ERROR_TERMINAL",
    }
    return code_names.get(code, f"UNKNOWN({code})")
