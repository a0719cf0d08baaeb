"""Terminal input: cbreak-mode setup/teardown and key reads (POSIX)."""

import os
import select
import sys
import termios
import tty
from collections import deque
from contextlib import contextmanager
from typing import TextIO

# Bytes taken per read; enough for a burst of held-down arrow keys
READ_SIZE = 1024

KEY_NAMES = {
    "\r": "enter",
    "\n": "enter",
    "\x1b": "esc",
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1bOA": "up",
    "\x1bOB": "down",
}


@contextmanager
def raw_terminal(stream: TextIO | None = None):
    """Switch the terminal to cbreak mode, restoring the saved mode on exit."""
    stream = stream or sys.stdin
    if not stream.isatty():
        yield stream
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield stream
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def split_keys(data: str) -> list[str]:
    """
    Split raw terminal input into key names ("enter", "up", "q", ...).

    Several presses can arrive in one read, e.g. while an arrow key is held
    down. Escape sequences without a key name are consumed and dropped; an
    ESC that starts no sequence is the Esc key.
    """
    keys = []
    i = 0
    while i < len(data):
        char = data[i]
        if char != "\x1b":
            keys.append(KEY_NAMES.get(char, char.lower()))
            i += 1
            continue

        sequence = data[i:i + 3]
        if sequence in KEY_NAMES:
            keys.append(KEY_NAMES[sequence])
            i += 3
        elif data[i + 1:i + 2] in ("[", "O"):
            # Skip to the final byte of an unhandled CSI/SS3 sequence
            j = i + 2
            while j < len(data) and not (data[j].isalpha() or data[j] == "~"):
                j += 1
            i = j + 1
        else:
            keys.append("esc")
            i += 1
    return keys


class KeyReader:
    """Hands out key presses one at a time, queueing those read together."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdin
        self.pending: deque[str] = deque()

    def read(self, timeout: float) -> str | None:
        """Wait up to timeout seconds for a key press. Returns None on timeout."""
        if self.pending:
            return self.pending.popleft()

        fd = self.stream.fileno()
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout))
        if not ready:
            return None
        self.pending.extend(split_keys(os.read(fd, READ_SIZE).decode(errors="ignore")))
        return self.pending.popleft() if self.pending else None
