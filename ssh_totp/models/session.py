"""Session state machine data models."""

from dataclasses import dataclass
from enum import Enum


class SessionState(Enum):
    """Automation state of one SSH session."""

    AWAITING_PASSWORD = "awaiting_password"
    AWAITING_TOTP = "awaiting_totp"
    TRANSPARENT = "transparent"


class Injection(Enum):
    """Credential to write to the session."""

    PASSWORD = "password"
    TOTP = "totp"


@dataclass
class ScanResult:
    """Outcome of scanning new output."""

    state: SessionState
    buffer: str
    injections: list[Injection]
