"""
Standard exit codes for librespot-setup.

Following Unix/POSIX conventions for command-line tools. Every aborted
step exits with GENERAL_ERROR; the message tells the causes apart.
"""
import sys
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # Any aborted step
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


def exit_with_code(code: int, message: Optional[str] = None, hint: Optional[str] = None):
    """
    Exit with a specific code and optional message.

    Args:
        code: Exit code
        message: Optional message to print to stderr
        hint: Printed after the message when the code is non-zero
    """
    if message:
        print(f"{message} with exit code {code}", file=sys.stderr)
    if hint and code != SUCCESS:
        print(hint, file=sys.stderr)
    sys.exit(code)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class StepFailure(CommandError):
    """Raised by an installation step to abort the whole run."""
    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message, GENERAL_ERROR)
        self.step = step
        self.summary = None
