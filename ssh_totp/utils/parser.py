"""Command-line argument parsing."""

from collections.abc import Sequence

from ssh_totp.errors import UsageError
from ssh_totp.models import Invocation, TargetAddress

USAGE = (
    "Usage: ssh-totp <server> <namespace> [username]\n"
    "  or:  ssh-totp <username@server> <namespace>"
)


def parse_args(args: Sequence[str]) -> Invocation:
    """Parse positional arguments (program name excluded).

    Formats:
        - "server namespace" -> ssh server
        - "server namespace username" -> ssh username@server
        - "user@server namespace [username]" -> ssh user@server

    Returns:
        Invocation with the composed target and TOTP namespace.

    Raises:
        UsageError: If the argument count is not 2 or 3.
    """
    if len(args) not in (2, 3):
        raise UsageError(len(args))

    server, namespace = args[0], args[1]
    username = args[2] if len(args) == 3 else None

    return Invocation(
        target=TargetAddress.compose(server, username),
        namespace=namespace,
    )
