"""Horizontal tab navigation."""

from dataclasses import dataclass
from typing import Any, Optional

from ..style import Colors, style
from ..terminal import Terminal


@dataclass(frozen=True)
class Tab:
    """One navigation tab."""
    id: Any
    name: str
    key: str
    icon: str


class TabBar:
    """Ordered tabs with exactly one active index."""

    SEPARATOR = "│"
    RULE = "─"

    def __init__(self, terminal: Terminal, tabs: list[Tab]):
        self.terminal = terminal
        self.tabs = list(tabs)
        self.active = 0

    def set_active(self, index: int) -> None:
        """Activate a tab by index; out-of-range indices are ignored."""
        if 0 <= index < len(self.tabs):
            self.active = index

    def set_active_by_id(self, tab_id: Any) -> None:
        """Activate the tab with `tab_id`; unknown ids are ignored."""
        for index, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                self.active = index
                return

    def active_tab(self) -> Optional[Tab]:
        if 0 <= self.active < len(self.tabs):
            return self.tabs[self.active]
        return None

    def next(self) -> None:
        """Advance to the next tab, wrapping around after the last one."""
        if self.tabs:
            self.active = (self.active + 1) % len(self.tabs)

    def render(self, row: int, col: int, width: int) -> None:
        """Draw the tabs on `row` and a dim rule underneath."""
        parts = [" "]
        for index, tab in enumerate(self.tabs):
            text = f" {tab.icon} {tab.name} [{tab.key}] "
            if index == self.active:
                parts.append(style(text, Colors.BOLD, Colors.REVERSE))
            else:
                parts.append(style(text, Colors.DIM))
            if index < len(self.tabs) - 1:
                parts.append(self.SEPARATOR)

        self.terminal.move_cursor(row, col)
        self.terminal.write("".join(parts))

        self.terminal.move_cursor(row + 1, col)
        self.terminal.write(style(self.RULE * max(0, width - col), Colors.DIM))
