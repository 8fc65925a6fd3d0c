"""Utilities for ssh-totp."""

from ssh_totp.utils.console import ColorfulFormatter, configure_logging
from ssh_totp.utils.parser import USAGE, parse_args

__all__ = [
    "ColorfulFormatter",
    "configure_logging",
    "parse_args",
    "USAGE",
]
