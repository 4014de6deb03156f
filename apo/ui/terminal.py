"""Low-level terminal control: raw mode, cursor, screen and key decoding.

The driver writes control sequences to an output stream and reads single
keystrokes from the input file descriptor. Only the main UI thread may use it.
"""

import os
import sys
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, TextIO

from ..exceptions import TerminalError

# Cross-platform terminal handling
IS_WINDOWS = sys.platform == "win32"

if IS_WINDOWS:
    import msvcrt
else:
    import select
    import termios
    import tty


DEFAULT_ROWS = 40
DEFAULT_COLUMNS = 120

# Largest sequence decoded as one key (ESC [ A)
MAX_KEY_BYTES = 3


class KeyType(Enum):
    """Kind of key event produced by the decoder."""
    CHAR = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    TAB = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    INTERRUPT = auto()


@dataclass(frozen=True)
class Key:
    """A single decoded key press. `char` is only set for CHAR keys."""
    type: KeyType
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "Key":
        """Build a printable-character key."""
        return cls(KeyType.CHAR, char)

    def is_char(self, *chars: str) -> bool:
        """Check whether this is a CHAR key carrying one of `chars`."""
        return self.type == KeyType.CHAR and self.char in chars


_SINGLE_BYTE_KEYS = {
    3: KeyType.INTERRUPT,
    9: KeyType.TAB,
    13: KeyType.ENTER,
    27: KeyType.ESCAPE,
    127: KeyType.BACKSPACE,
}

_ARROW_KEYS = {
    ord("A"): KeyType.UP,
    ord("B"): KeyType.DOWN,
    ord("C"): KeyType.RIGHT,
    ord("D"): KeyType.LEFT,
}


def decode_key(data: bytes) -> Key:
    """Decode up to three raw input bytes into a key event.

    A single byte maps directly to a control key or a printable character.
    ESC [ A/B/C/D maps to the arrow keys. Anything else decodes only the
    first byte as a printable character.

    Args:
        data: Bytes from a single read of the input stream (1 to 3 bytes)

    Returns:
        The decoded key
    """
    if not data:
        raise ValueError("cannot decode an empty key sequence")

    if len(data) == 1:
        key_type = _SINGLE_BYTE_KEYS.get(data[0])
        if key_type is not None:
            return Key(key_type)
        return Key.of(chr(data[0]))

    if len(data) >= 3 and data[0] == 27 and data[1] == ord("["):
        key_type = _ARROW_KEYS.get(data[2])
        if key_type is not None:
            return Key(key_type)

    return Key.of(chr(data[0]))


class Terminal:
    """Owns the physical terminal for the lifetime of the UI."""

    CLEAR = "\033[2J\033[H"
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"

    def __init__(self, output: Optional[TextIO] = None, input_fd: Optional[int] = None):
        self._out = output if output is not None else sys.stdout
        self._input_fd = input_fd
        self._old_terminal_settings: Optional[list[Any]] = None

    @property
    def input_fd(self) -> int:
        if self._input_fd is None:
            self._input_fd = sys.stdin.fileno()
        return self._input_fd

    # =========================================================================
    # Raw mode
    # =========================================================================

    def enable_raw_mode(self) -> None:
        """Switch input to unbuffered, unechoed, byte-at-a-time mode.

        Raises:
            TerminalError: If the input is not an interactive terminal
        """
        if IS_WINDOWS:
            # msvcrt already reads the console one key at a time
            return
        try:
            self._old_terminal_settings = termios.tcgetattr(self.input_fd)
            tty.setraw(self.input_fd)
        except (termios.error, AttributeError, ValueError, OSError) as e:
            self._old_terminal_settings = None
            raise TerminalError(f"cannot enable raw mode: {e}") from e

    def disable_raw_mode(self) -> None:
        """Restore the settings saved by enable_raw_mode().

        Raises:
            TerminalError: If the saved settings cannot be applied
        """
        if IS_WINDOWS or self._old_terminal_settings is None:
            return
        try:
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._old_terminal_settings)
        except (termios.error, ValueError, OSError) as e:
            raise TerminalError(f"cannot restore terminal mode: {e}") from e
        finally:
            self._old_terminal_settings = None

    @property
    def is_raw(self) -> bool:
        return self._old_terminal_settings is not None

    # =========================================================================
    # Output
    # =========================================================================

    def query_size(self) -> tuple[int, int]:
        """Get terminal (rows, columns), falling back to 40x120."""
        try:
            size = os.get_terminal_size(self._out.fileno())
        except (OSError, AttributeError, ValueError):
            return (DEFAULT_ROWS, DEFAULT_COLUMNS)
        rows = size.lines or DEFAULT_ROWS
        columns = size.columns or DEFAULT_COLUMNS
        return (rows, columns)

    def write(self, text: str) -> None:
        self._out.write(text)

    def flush(self) -> None:
        self._out.flush()

    def clear_screen(self) -> None:
        self._out.write(self.CLEAR)

    def move_cursor(self, row: int, col: int) -> None:
        """Move the cursor to a 1-indexed screen position."""
        self._out.write(f"\033[{max(1, row)};{max(1, col)}H")

    def hide_cursor(self) -> None:
        self._out.write(self.HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._out.write(self.SHOW_CURSOR)

    # =========================================================================
    # Key Input (Cross-platform)
    # =========================================================================

    def read_key(self, timeout: Optional[float] = None) -> Optional[Key]:
        """Block until one key press is available.

        Args:
            timeout: Seconds to wait before giving up; None waits forever

        Returns:
            The decoded key, or None if the timeout expired first

        Raises:
            EOFError: If the input stream is closed
            OSError: If reading the input stream fails
        """
        if IS_WINDOWS:
            return self._read_key_windows(timeout)
        return self._read_key_unix(timeout)

    def _read_key_unix(self, timeout: Optional[float]) -> Optional[Key]:
        fd = self.input_fd
        if timeout is not None:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return None
        data = os.read(fd, MAX_KEY_BYTES)
        if not data:
            raise EOFError("terminal input closed")
        return decode_key(data)

    def _read_key_windows(self, timeout: Optional[float]) -> Optional[Key]:
        deadline = None if timeout is None else time.monotonic() + timeout
        while not msvcrt.kbhit():
            if deadline is not None and time.monotonic() >= deadline:
                return None
            time.sleep(0.01)

        ch = msvcrt.getch()
        # Special keys (arrows) arrive as a two-byte sequence
        if ch in (b"\x00", b"\xe0"):
            ch2 = msvcrt.getch()
            arrows = {b"H": b"A", b"P": b"B", b"M": b"C", b"K": b"D"}
            if ch2 in arrows:
                return decode_key(b"\x1b[" + arrows[ch2])
        if ch == b"\x08":
            return Key(KeyType.BACKSPACE)
        return decode_key(ch)
