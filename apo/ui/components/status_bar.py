"""Status line and key-binding help bar.

The refresh worker posts messages from its own thread, so every field is
guarded by an internal lock.
"""

import threading
import time
from datetime import datetime
from typing import Callable, Optional

from ..style import Colors, display_width, pad, style
from ..terminal import Terminal

# Seconds a transient message stays visible
MESSAGE_TTL = 3.0


class StatusBar:
    """Transient message, last-refresh time and help text."""

    RULE = "─"

    def __init__(self, terminal: Terminal, clock: Callable[[], float] = time.monotonic):
        self.terminal = terminal
        self._clock = clock
        self._lock = threading.Lock()
        self._message = ""
        self._message_time: Optional[float] = None
        self._last_refresh: Optional[datetime] = None
        self._help = ""

    def set_message(self, message: str) -> None:
        with self._lock:
            self._message = message
            self._message_time = self._clock()

    def set_last_refresh(self, when: datetime) -> None:
        with self._lock:
            self._last_refresh = when

    def set_help(self, text: str) -> None:
        with self._lock:
            self._help = text

    @property
    def help_text(self) -> str:
        with self._lock:
            return self._help

    def visible_message(self) -> str:
        """The current message, or "" once it is older than MESSAGE_TTL."""
        with self._lock:
            if not self._message or self._message_time is None:
                return ""
            if self._clock() - self._message_time >= MESSAGE_TTL:
                return ""
            return self._message

    def last_refresh_text(self) -> str:
        with self._lock:
            if self._last_refresh is None:
                return ""
            return f"Last refresh: {self._last_refresh.strftime('%H:%M:%S')}"

    def render(self, row: int, width: int) -> None:
        """Draw the status rule on `row` and the help bar on `row + 1`."""
        term = self.terminal
        term.move_cursor(row, 1)
        term.write(style(self.RULE * width, Colors.DIM))

        message = self.visible_message()
        if message:
            term.move_cursor(row, 3)
            term.write(style(f" {message} ", Colors.YELLOW))

        refresh = self.last_refresh_text()
        if refresh:
            term.move_cursor(row, width - display_width(refresh) - 2)
            term.write(style(refresh, Colors.DIM))

        term.move_cursor(row + 1, 1)
        term.write(style(pad(self.help_text, width), Colors.BG_BLUE, Colors.WHITE))
