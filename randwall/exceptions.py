"""
randwall exit statuses and the base class for errors that should be shown to the user.

Errors that the user can do something about derive from RandwallError and carry the exit
status the program should finish with. They are defined next to the code that raises them.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGUMENTS = 1
    USER_ERROR = 2
    NO_IMAGES = 3
    CRASH = 9


class RandwallError(Exception):
    """Raise when an operation fails in a way that should be reported to the user."""

    exit_code: ExitCode = ExitCode.CRASH

    def __init__(self, message: str, exit_code: ExitCode = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code
