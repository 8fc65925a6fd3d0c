"""Data models for ssh-totp."""

from ssh_totp.models.session import Injection, ScanResult, SessionState
from ssh_totp.models.target import Invocation, TargetAddress

__all__ = [
    "Injection",
    "Invocation",
    "ScanResult",
    "SessionState",
    "TargetAddress",
]
