"""Configuration module for ssh-totp.

- Settings: Environment variable configuration
"""

from ssh_totp.config.settings import Settings

__all__ = ["Settings"]
