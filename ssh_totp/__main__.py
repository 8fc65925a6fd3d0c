"""Entry point for ssh-totp."""

import asyncio
import logging
import sys
from collections.abc import Sequence

from ssh_totp.config import Settings
from ssh_totp.errors import ChildExitError, SSHTOTPError, UsageError
from ssh_totp.models import Invocation
from ssh_totp.services import CredentialProvider, SessionDriver, TOTPGenerator
from ssh_totp.utils import USAGE, configure_logging, parse_args

logger = logging.getLogger(__name__)


async def login(invocation: Invocation, settings: Settings) -> int:
    """Collect both credentials and run the SSH session.

    Args:
        invocation: Parsed command line
        settings: Application settings

    Returns:
        0 on success (failures raise)
    """
    ssh_credentials = CredentialProvider("SSH Password: ")
    password = ssh_credentials.get_or_prompt()

    generator = TOTPGenerator(
        CredentialProvider("TOTP Password: ", env_var=settings.totp_password_env),
        command=settings.totp_command,
    )
    totp_code = await generator.generate(invocation.namespace, str(invocation.target))

    driver = SessionDriver(settings)
    return await driver.run(invocation.target, password, totp_code)


def main(argv: Sequence[str] | None = None) -> int:
    """Run ssh-totp and return the process exit code."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_colors)

    args = sys.argv[1:] if argv is None else argv
    try:
        invocation = parse_args(args)
    except UsageError as e:
        logger.debug("%s", e)
        print(USAGE)
        return 1

    try:
        return asyncio.run(login(invocation, settings))
    except ChildExitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except SSHTOTPError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
