"""Interactive credential provider with a process-lifetime cache."""

import getpass
import logging
import os
import warnings
from typing import TextIO

from ssh_totp.errors import TerminalIOError

logger = logging.getLogger(__name__)


class CredentialProvider:
    """Obtains one secret, prompting at most once per process.

    The secret is held on the instance. When ``env_var`` is given, a value
    already present in the environment seeds the cache and a prompted value
    is exported back so that later lookups in this process (and any child
    tools that read the variable) reuse it.
    """

    def __init__(
        self,
        prompt: str,
        env_var: str | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            prompt: Text written to the terminal before reading
            env_var: Environment variable used as cache, or None
            stream: Where to write the prompt (default: controlling terminal)
        """
        self.prompt = prompt
        self.env_var = env_var
        self.stream = stream
        self._secret: str | None = None

    def get_or_prompt(self) -> str:
        """Return the cached secret, prompting with echo disabled if needed.

        Returns:
            The secret

        Raises:
            TerminalIOError: If echo cannot be disabled or the read fails
        """
        if self._secret is not None:
            return self._secret

        if self.env_var:
            cached = os.environ.get(self.env_var)
            if cached:
                logger.debug("Using cached credential from %s", self.env_var)
                self._secret = cached
                return cached

        label = self.prompt.strip().rstrip(":")
        try:
            # getpass only warns when it cannot turn echo off, then reads anyway.
            with warnings.catch_warnings():
                warnings.simplefilter("error", getpass.GetPassWarning)
                secret = getpass.getpass(self.prompt, stream=self.stream)
        except (OSError, EOFError, getpass.GetPassWarning) as e:
            raise TerminalIOError(f"read {label}", e) from e

        self._secret = secret
        if self.env_var:
            os.environ[self.env_var] = secret
        logger.debug("Read %s from terminal", label)
        return secret
