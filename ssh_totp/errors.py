"""Error taxonomy for ssh-totp.

Every error raised by the package derives from SSHTOTPError and is reported
once by the entry point. Errors inside the forwarding tasks never reach here.
"""


class SSHTOTPError(Exception):
    """Base class for all ssh-totp errors."""


class UsageError(SSHTOTPError):
    """Wrong number of command-line arguments."""

    def __init__(self, argc: int):
        """Initialize usage error.

        Args:
            argc: Number of arguments received (excluding program name)
        """
        self.argc = argc
        super().__init__(f"Expected 2 or 3 arguments, got {argc}")


class TerminalIOError(SSHTOTPError):
    """Terminal mode change or interactive password read failed."""

    def __init__(self, action: str, original_error: Exception):
        """Initialize terminal error.

        Args:
            action: What was being attempted (e.g. "read TOTP Password")
            original_error: Underlying exception
        """
        self.action = action
        self.original_error = original_error
        super().__init__(f"Failed to {action}: {original_error}")


class ExternalToolError(SSHTOTPError):
    """TOTP generator command could not be started or exited non-zero."""

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize external tool error.

        Args:
            command: Name of the generator command
            returncode: Exit status, None if the command never started
            original_error: Launch failure, if any
        """
        self.command = command
        self.returncode = returncode
        self.original_error = original_error
        if original_error is not None:
            detail = str(original_error)
        else:
            detail = f"exit status {returncode}"
        super().__init__(f"Failed to generate TOTP code with {command}: {detail}")


class SessionStartError(SSHTOTPError):
    """Pseudo-terminal allocation or SSH client launch failed."""

    def __init__(self, target: str, original_error: Exception):
        """Initialize session start error.

        Args:
            target: Target address the session was for
            original_error: Underlying exception
        """
        self.target = target
        self.original_error = original_error
        super().__init__(f"Failed to start SSH session to {target}: {original_error}")


class ChildExitError(SSHTOTPError):
    """SSH client terminated with a non-zero status."""

    def __init__(self, target: str, returncode: int):
        """Initialize child exit error.

        Args:
            target: Target address of the session
            returncode: Exit status of the SSH client (negative for signals)
        """
        self.target = target
        self.returncode = returncode
        super().__init__(f"SSH session to {target} exited with status {returncode}")

    @property
    def exit_code(self) -> int:
        """Process exit code to propagate, always non-zero."""
        if self.returncode > 0:
            return self.returncode
        return 1
