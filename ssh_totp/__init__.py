"""ssh-totp: SSH login automation for password + TOTP challenges."""

__version__ = "0.1.0"
