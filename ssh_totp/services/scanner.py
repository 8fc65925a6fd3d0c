"""Prompt-scanning state machine.

The transition function is pure: it takes the current state, the text
accumulated since the last match and newly read text, and reports which
credentials to inject. Each prompt fires at most once per session and the
TOTP prompt is only considered after the password prompt has fired.
"""

import logging

from ssh_totp.config.settings import DEFAULT_PASSWORD_PROMPT, DEFAULT_TOTP_PROMPT
from ssh_totp.models import Injection, ScanResult, SessionState

logger = logging.getLogger(__name__)


def scan(
    state: SessionState,
    buffer: str,
    text: str,
    password_prompt: str = DEFAULT_PASSWORD_PROMPT,
    totp_prompt: str = DEFAULT_TOTP_PROMPT,
) -> ScanResult:
    """Advance the state machine with newly read output.

    Args:
        state: Current session state
        buffer: Output accumulated since the last match
        text: Newly read output
        password_prompt: Substring that triggers password injection
        totp_prompt: Substring that triggers TOTP injection

    Returns:
        ScanResult with the next state, the remaining buffer and the
        injections to perform, in order.
    """
    if state is SessionState.TRANSPARENT:
        return ScanResult(state=state, buffer="", injections=[])

    buffer += text
    injections: list[Injection] = []

    if state is SessionState.AWAITING_PASSWORD and password_prompt in buffer:
        state = SessionState.AWAITING_TOTP
        buffer = ""
        injections.append(Injection.PASSWORD)

    if state is SessionState.AWAITING_TOTP and totp_prompt in buffer:
        state = SessionState.TRANSPARENT
        buffer = ""
        injections.append(Injection.TOTP)

    # Only a partial prompt can still complete on the next read.
    keep = max(len(password_prompt), len(totp_prompt)) - 1
    if len(buffer) > keep:
        buffer = buffer[-keep:] if keep > 0 else ""

    return ScanResult(state=state, buffer=buffer, injections=injections)


class PromptScanner:
    """Stateful wrapper around :func:`scan` owned by the output task."""

    def __init__(
        self,
        password_prompt: str = DEFAULT_PASSWORD_PROMPT,
        totp_prompt: str = DEFAULT_TOTP_PROMPT,
    ) -> None:
        self.password_prompt = password_prompt
        self.totp_prompt = totp_prompt
        self.state = SessionState.AWAITING_PASSWORD
        self.buffer = ""

    def feed(self, text: str) -> list[Injection]:
        """Scan newly read text and return the injections it triggers."""
        result = scan(
            self.state,
            self.buffer,
            text,
            password_prompt=self.password_prompt,
            totp_prompt=self.totp_prompt,
        )
        if result.state is not self.state:
            logger.debug("Session state %s -> %s", self.state.value, result.state.value)
        self.state = result.state
        self.buffer = result.buffer
        return result.injections
