"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_PROMPT = "Password:"
DEFAULT_TOTP_PROMPT = "Verification code:"


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # External commands
    ssh_command: str = field(default="ssh")
    totp_command: str = field(default="totp-cli")

    # Credential cache
    totp_password_env: str = field(default="TOTP_PASS")

    # Prompt detection
    password_prompt: str = field(default=DEFAULT_PASSWORD_PROMPT)
    totp_prompt: str = field(default=DEFAULT_TOTP_PROMPT)
    read_size: int = field(default=1024)

    # Logging
    log_level: str = field(default="WARNING")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            ssh_command=os.getenv("SSH_TOTP_SSH_COMMAND") or "ssh",
            totp_command=os.getenv("SSH_TOTP_GENERATOR") or "totp-cli",
            password_prompt=os.getenv("SSH_TOTP_PASSWORD_PROMPT") or DEFAULT_PASSWORD_PROMPT,
            totp_prompt=os.getenv("SSH_TOTP_CODE_PROMPT") or DEFAULT_TOTP_PROMPT,
            read_size=cls._get_positive_int("SSH_TOTP_READ_SIZE", 1024),
            log_level=os.getenv("SSH_TOTP_LOG_LEVEL", "WARNING").upper(),
            log_colors=cls._get_bool("SSH_TOTP_LOG_COLORS", True),
        )

    @staticmethod
    def _get_positive_int(key: str, default: int) -> int:
        """Get a positive integer from environment.

        Args:
            key: Environment variable key
            default: Default value if unset or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("Non-positive %s: %d, using default %d", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")
