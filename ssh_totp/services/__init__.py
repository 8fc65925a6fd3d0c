"""Services for ssh-totp."""

from ssh_totp.services.credentials import CredentialProvider
from ssh_totp.services.scanner import PromptScanner, scan
from ssh_totp.services.session import PtyWriter, SessionDriver
from ssh_totp.services.terminal import raw_mode
from ssh_totp.services.totp import TOTPGenerator, extract_code

__all__ = [
    "CredentialProvider",
    "PromptScanner",
    "PtyWriter",
    "SessionDriver",
    "TOTPGenerator",
    "extract_code",
    "raw_mode",
    "scan",
]
