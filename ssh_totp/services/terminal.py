"""Controlling-terminal helpers: raw mode and window size."""

import fcntl
import logging
import os
import struct
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager

from ssh_totp.errors import TerminalIOError

logger = logging.getLogger(__name__)


@contextmanager
def raw_mode(fd: int) -> Iterator[bool]:
    """Put a terminal into raw mode for the duration of the block.

    The previous settings are restored on every exit path. A descriptor
    that is not a terminal is left alone.

    Args:
        fd: File descriptor of the terminal (usually stdin)

    Yields:
        True if raw mode was entered, False if fd is not a terminal

    Raises:
        TerminalIOError: If the terminal settings cannot be changed
    """
    if not os.isatty(fd):
        logger.debug("fd %d is not a terminal, skipping raw mode", fd)
        yield False
        return

    try:
        saved = termios.tcgetattr(fd)
        tty.setraw(fd)
    except (termios.error, OSError) as e:
        raise TerminalIOError("set terminal to raw mode", e) from e

    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved)
        logger.debug("Terminal mode restored")


def get_window_size(fd: int) -> tuple[int, int] | None:
    """Read (rows, cols) from a terminal, None if unavailable."""
    try:
        packed = fcntl.ioctl(fd, termios.TIOCGWINSZ, b"\x00" * 8)
    except OSError:
        return None
    rows, cols, _, _ = struct.unpack("HHHH", packed)
    if rows == 0 and cols == 0:
        return None
    return rows, cols


def set_window_size(fd: int, rows: int, cols: int) -> None:
    """Apply a window size to a terminal (typically a pty master)."""
    fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, 0, 0))


def copy_window_size(source_fd: int, target_fd: int) -> None:
    """Copy the window size of one terminal onto another, if known."""
    size = get_window_size(source_fd)
    if size is None:
        return
    try:
        set_window_size(target_fd, *size)
    except OSError as e:
        logger.debug("Could not resize pty: %s", e)
        return
    logger.debug("Window size set to %dx%d", size[1], size[0])


def make_controlling_terminal() -> None:
    """Make stdin the controlling terminal of the calling process.

    Runs in the child between fork and exec, after setsid().
    """
    fcntl.ioctl(0, termios.TIOCSCTTY, 0)
