"""Pseudo-terminal session driver.

Runs the SSH client under a pty and multiplexes two tasks on one event loop:

- output task: pty -> stdout, scanning for prompts and injecting credentials
- input task: stdin -> pty

Both write to the pty through a single PtyWriter so an injected credential
never interleaves with forwarded keystrokes. The child's exit status is the
only result; errors inside either task just end that task.
"""

import asyncio
import codecs
import logging
import os
import pty
import signal
import subprocess
import sys
from typing import BinaryIO

from ssh_totp.config import Settings
from ssh_totp.errors import ChildExitError, SessionStartError
from ssh_totp.models import Injection, TargetAddress
from ssh_totp.services.scanner import PromptScanner
from ssh_totp.services.terminal import copy_window_size, make_controlling_terminal, raw_mode

logger = logging.getLogger(__name__)

# Seconds to keep draining output after the child has exited.
DRAIN_TIMEOUT = 1.0


def _set_ready(ready: "asyncio.Future[None]") -> None:
    if not ready.done():
        ready.set_result(None)


async def _wait_ready(fd: int, writable: bool = False) -> None:
    """Wait until fd is readable (or writable)."""
    loop = asyncio.get_running_loop()
    ready: asyncio.Future[None] = loop.create_future()
    if writable:
        loop.add_writer(fd, _set_ready, ready)
    else:
        loop.add_reader(fd, _set_ready, ready)
    try:
        await ready
    finally:
        if writable:
            loop.remove_writer(fd)
        else:
            loop.remove_reader(fd)


async def read_fd(fd: int, size: int) -> bytes:
    """Read up to size bytes from fd without blocking the event loop.

    Returns:
        The bytes read, b"" at end of stream

    Raises:
        OSError: If the descriptor is closed or broken (EIO from a pty
            master once the child side is gone)
    """
    while True:
        await _wait_ready(fd)
        try:
            return os.read(fd, size)
        except BlockingIOError:
            continue


class PtyWriter:
    """Serialized writer for the pty master."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._lock = asyncio.Lock()

    async def write(self, data: bytes) -> None:
        """Write all of data, waiting for the pty to drain if needed."""
        async with self._lock:
            view = memoryview(data)
            while view:
                try:
                    written = os.write(self.fd, view)
                except BlockingIOError:
                    await _wait_ready(self.fd, writable=True)
                    continue
                view = view[written:]


class SessionDriver:
    """Drives one interactive SSH session with credential injection."""

    def __init__(
        self,
        settings: Settings,
        stdin_fd: int | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        """Initialize driver.

        Args:
            settings: Application settings (commands, prompts, read size)
            stdin_fd: User input descriptor (default: sys.stdin)
            stdout: Binary stream that receives session output (default: sys.stdout)
        """
        self.settings = settings
        self.stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self.stdout = sys.stdout.buffer if stdout is None else stdout

    async def run(self, target: TargetAddress, password: str, totp_code: str) -> int:
        """Run the session until the SSH client exits.

        Args:
            target: Destination passed to the SSH client
            password: Sent once at the password prompt
            totp_code: Sent once at the verification code prompt

        Returns:
            0 when the SSH client exits successfully

        Raises:
            SessionStartError: If the pty or the SSH client cannot be started
            ChildExitError: If the SSH client exits with a non-zero status
            TerminalIOError: If stdin cannot be switched to raw mode
        """
        with raw_mode(self.stdin_fd) as is_tty:
            master_fd, process = await self._spawn(target)
            try:
                returncode = await self._interact(
                    master_fd, process, is_tty, password, totp_code
                )
            finally:
                os.close(master_fd)

        logger.info("SSH session to %s exited with status %d", target, returncode)
        if returncode != 0:
            raise ChildExitError(str(target), returncode)
        return returncode

    async def _spawn(
        self, target: TargetAddress
    ) -> tuple[int, asyncio.subprocess.Process]:
        """Allocate a pty and start the SSH client on its slave side."""
        try:
            master_fd, slave_fd = pty.openpty()
        except OSError as e:
            raise SessionStartError(str(target), e) from e

        if os.isatty(self.stdin_fd):
            copy_window_size(self.stdin_fd, master_fd)

        logger.info("Starting %s %s", self.settings.ssh_command, target)
        try:
            process = await asyncio.create_subprocess_exec(
                self.settings.ssh_command,
                str(target),
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                start_new_session=True,
                preexec_fn=make_controlling_terminal,
            )
        except (OSError, subprocess.SubprocessError) as e:
            os.close(master_fd)
            raise SessionStartError(str(target), e) from e
        finally:
            os.close(slave_fd)

        os.set_blocking(master_fd, False)
        return master_fd, process

    async def _interact(
        self,
        master_fd: int,
        process: asyncio.subprocess.Process,
        is_tty: bool,
        password: str,
        totp_code: str,
    ) -> int:
        """Forward I/O in both directions until the child exits."""
        writer = PtyWriter(master_fd)
        scanner = PromptScanner(
            password_prompt=self.settings.password_prompt,
            totp_prompt=self.settings.totp_prompt,
        )
        secrets = {
            Injection.PASSWORD: password,
            Injection.TOTP: totp_code,
        }

        output_task = asyncio.create_task(
            self._forward_output(master_fd, scanner, writer, secrets)
        )
        input_task = asyncio.create_task(self._forward_input(writer))
        resize = is_tty and self._watch_window_size(master_fd)

        try:
            return await process.wait()
        finally:
            if resize:
                asyncio.get_running_loop().remove_signal_handler(signal.SIGWINCH)
            input_task.cancel()
            try:
                await asyncio.wait_for(output_task, timeout=DRAIN_TIMEOUT)
            except TimeoutError:
                logger.debug("Output still open after child exit, abandoning")
            await asyncio.gather(input_task, return_exceptions=True)

    async def _forward_output(
        self,
        master_fd: int,
        scanner: PromptScanner,
        writer: PtyWriter,
        secrets: dict[Injection, str],
    ) -> None:
        """Copy pty output to stdout and answer prompts."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            try:
                data = await read_fd(master_fd, self.settings.read_size)
                if not data:
                    logger.debug("Session output reached end of stream")
                    return

                self.stdout.write(data)
                self.stdout.flush()

                for injection in scanner.feed(decoder.decode(data)):
                    logger.info("Prompt detected, sending %s", injection.value)
                    await writer.write(secrets[injection].encode() + b"\n")
            except OSError as e:
                logger.debug("Session output closed: %s", e)
                return

    async def _forward_input(self, writer: PtyWriter) -> None:
        """Copy user keystrokes to the pty."""
        while True:
            try:
                data = await read_fd(self.stdin_fd, self.settings.read_size)
                if not data:
                    logger.debug("Input reached end of stream")
                    return
                await writer.write(data)
            except OSError as e:
                logger.debug("Input forwarding stopped: %s", e)
                return

    def _watch_window_size(self, master_fd: int) -> bool:
        """Propagate terminal resizes to the pty. Returns True if installed."""
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(
                signal.SIGWINCH, copy_window_size, self.stdin_fd, master_fd
            )
        except (RuntimeError, ValueError) as e:
            logger.debug("Cannot watch window size: %s", e)
            return False
        return True
