"""TOTP code generation through an external command."""

import asyncio
import logging

from ssh_totp.errors import ExternalToolError
from ssh_totp.services.credentials import CredentialProvider

logger = logging.getLogger(__name__)


def extract_code(output: str) -> str:
    """Return the last line of generator output.

    Surrounding whitespace is trimmed from the whole capture first, so
    trailing newlines are ignored. Empty output yields an empty string.

    Args:
        output: Captured standard output

    Returns:
        The TOTP code
    """
    return output.strip().split("\n")[-1]


class TOTPGenerator:
    """Runs ``<command> generate <namespace> <identity>``."""

    def __init__(self, credentials: CredentialProvider, command: str = "totp-cli") -> None:
        """Initialize generator.

        Args:
            credentials: Provider of the password fed to the command's stdin
            command: Generator executable
        """
        self.credentials = credentials
        self.command = command

    async def generate(self, namespace: str, identity: str) -> str:
        """Generate a TOTP code.

        Standard error of the command goes straight to the terminal so its
        own diagnostics stay visible.

        Args:
            namespace: Generator namespace
            identity: Account name within the namespace

        Returns:
            The generated code ("" if the command printed nothing)

        Raises:
            ExternalToolError: If the command cannot start or exits non-zero
            TerminalIOError: If the password has to be prompted and that fails
        """
        password = self.credentials.get_or_prompt()

        logger.info("Generating TOTP code (namespace=%s, identity=%s)", namespace, identity)
        try:
            process = await asyncio.create_subprocess_exec(
                self.command,
                "generate",
                namespace,
                identity,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=None,
            )
        except OSError as e:
            raise ExternalToolError(self.command, original_error=e) from e

        stdout, _ = await process.communicate(password.encode())

        if process.returncode != 0:
            logger.error("%s exited with status %s", self.command, process.returncode)
            raise ExternalToolError(self.command, returncode=process.returncode)

        code = extract_code(stdout.decode("utf-8", errors="replace"))
        if not code:
            logger.warning("%s produced no output", self.command)
        return code
