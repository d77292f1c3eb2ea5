"""Drive a session from a real terminal: keystrokes, resizes and drawing."""

from __future__ import annotations

import contextlib
import logging
import os
import select
import shutil
import signal
import sys
import termios
import tty
from typing import Iterator, Optional, TextIO

from rich.console import Console

from .navigation import Event, KeyEvent, ResizeEvent
from .session import Session

logger = logging.getLogger(__name__)

POLL_SECONDS = 0.2

_ESCAPE_SEQUENCES = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
    "[5~": "pgup",
    "[6~": "pgdown",
    "[H": "home",
    "[F": "end",
    "[1~": "home",
    "[4~": "end",
}

# SGR mouse reporting: button events arrive as "[<b;x;yM".
MOUSE_ON = "\x1b[?1000h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1000l\x1b[?1006l"
_WHEEL_BUTTONS = {"64": "wheelup", "65": "wheeldown"}
_MAX_SEQUENCE = 32

_CONTROL_KEYS = {
    "\x03": "ctrl+c",
    "\x04": "ctrl+d",
    "\x15": "ctrl+u",
    " ": "space",
    "\r": "enter",
    "\n": "enter",
}


def key_name(char: str, sequence: str = "") -> str:
    """Name a keystroke; ``sequence`` holds what followed an escape byte."""
    if char == "\x1b":
        if sequence.startswith("[<"):
            return _mouse_name(sequence)
        return _ESCAPE_SEQUENCES.get(sequence, "esc")
    return _CONTROL_KEYS.get(char, char)


def _mouse_name(sequence: str) -> str:
    button = sequence[2:].split(";", 1)[0]
    if sequence.endswith("M"):
        return _WHEEL_BUTTONS.get(button, "mouse")
    return "mouse"


def _sequence_complete(sequence: str) -> bool:
    if sequence.startswith("[<"):
        return sequence[-1] in "Mm" or len(sequence) >= _MAX_SEQUENCE
    return sequence[-1].isalpha() or sequence.endswith("~") or len(sequence) >= 6


class Terminal:
    """Reads keys from a tty in cbreak mode and reports window resizes."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdin
        self.fd = self.stream.fileno()
        self._resized = False

    def size_event(self) -> ResizeEvent:
        size = shutil.get_terminal_size()
        return ResizeEvent(size.columns, size.lines)

    @contextlib.contextmanager
    def cbreak(self) -> Iterator[None]:
        old_settings = termios.tcgetattr(self.fd)
        previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        try:
            tty.setcbreak(self.fd)
            yield
        finally:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, old_settings)
            signal.signal(signal.SIGWINCH, previous_handler)

    @contextlib.contextmanager
    def mouse_reporting(self, output: TextIO) -> Iterator[None]:
        """Ask the terminal to report wheel scrolls as escape sequences."""
        output.write(MOUSE_ON)
        output.flush()
        try:
            yield
        finally:
            output.write(MOUSE_OFF)
            output.flush()

    def read_key(self, timeout: float = POLL_SECONDS) -> Optional[str]:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        char = os.read(self.fd, 1).decode("utf-8", errors="ignore")
        if not char:
            return None
        sequence = ""
        if char == "\x1b":
            while select.select([self.fd], [], [], 0.001)[0]:
                sequence += os.read(self.fd, 1).decode("utf-8", errors="ignore")
                if sequence and _sequence_complete(sequence):
                    break
        return key_name(char, sequence)

    def events(self) -> Iterator[Event]:
        """Yield the initial size, then keys and resizes as they arrive."""
        yield self.size_event()
        while True:
            if self._resized:
                self._resized = False
                yield self.size_event()
                continue
            try:
                key = self.read_key()
            except KeyboardInterrupt:
                key = "ctrl+c"
            if key:
                yield KeyEvent(key)

    def _on_resize(self, signum, frame) -> None:
        self._resized = True


def draw(console: Console, frame: str) -> None:
    console.clear()
    console.file.write(frame)
    console.file.flush()


def run(session: Session, console: Optional[Console] = None) -> None:
    """Run ``session`` on the alternate screen until the user quits."""
    console = console or Console()
    terminal = Terminal()
    logger.info("Starting interactive session")
    with console.screen(hide_cursor=True), terminal.cbreak(), terminal.mouse_reporting(
        console.file
    ):
        for event in terminal.events():
            frame = session.dispatch(event)
            if frame is None:
                break
            draw(console, frame)
    logger.info("Session closed")
