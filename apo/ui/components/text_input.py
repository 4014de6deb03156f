"""Single-line text input."""

from ..style import Colors, display_width, pad, style
from ..terminal import Terminal

CURSOR = "█"


class TextInput:
    """Prompt plus an editable value buffer."""

    def __init__(self, terminal: Terminal, prompt: str):
        self.terminal = terminal
        self.prompt = prompt
        self.value = ""
        self.active = False

    def insert_char(self, char: str) -> None:
        self.value += char

    def backspace(self) -> None:
        self.value = self.value[:-1]

    def clear(self) -> None:
        self.value = ""

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def visible_value(self, width: int) -> str:
        """Tail of the value that fits after the prompt and the cursor."""
        room = width - display_width(self.prompt) - display_width(CURSOR)
        shown = self.value
        while shown and display_width(shown) > room:
            shown = shown[1:]
        return shown

    def render(self, row: int, col: int, width: int) -> None:
        """Blank the field, then draw prompt, value and the cursor when active.

        A value too long for the field scrolls so its end stays visible.
        """
        term = self.terminal
        term.move_cursor(row, col)
        term.write(pad("", width))

        term.move_cursor(row, col)
        term.write(style(self.prompt, Colors.GREEN, Colors.BOLD))
        term.write(self.visible_value(width))
        if self.active:
            term.write(style(CURSOR, Colors.BLINK))
