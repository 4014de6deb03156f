"""Scrollable, filterable list.

The list keeps a selection index and a scroll offset over its "active
sequence": every item, or, while a filter query is set, the indices of the
items whose label contains the query (case-insensitive, original order).
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..style import Colors, pad, style, truncate
from ..terminal import Terminal

# Rows used by the title and the rule above the items
HEADER_ROWS = 2
# Rows render() reserves besides the visible items
CHROME_ROWS = 3


@dataclass(frozen=True)
class ListItem:
    """One row of a list. `data` carries the record the row was built from."""
    id: str
    icon: str
    label: str
    sublabel: str = ""
    data: Any = None


class ListWidget:
    """Ordered items with selection, scrolling and a substring filter."""

    RULE = "─"
    CURSOR = "█"

    def __init__(self, terminal: Terminal, title: str, search_icon: str = "🔍"):
        self.terminal = terminal
        self.title = title
        self.search_icon = search_icon
        self.items: list[ListItem] = []
        self.filter_query = ""
        self.filter_mode = False
        self.scroll = 0
        self.height = 0
        self._selected = 0
        # None means no filter; an empty list means nothing matched
        self._filtered: Optional[list[int]] = None

    # =========================================================================
    # Content
    # =========================================================================

    def set_items(self, items: list[ListItem]) -> None:
        """Replace the items; clears any filter and resets the selection."""
        self.items = list(items)
        self.clear_filter()

    def active_indices(self) -> list[int]:
        if self._filtered is None:
            return list(range(len(self.items)))
        return self._filtered

    @property
    def is_filtered(self) -> bool:
        return self._filtered is not None

    @property
    def selection(self) -> Optional[int]:
        """Selected position in the active sequence, or None when it is empty."""
        if not self.active_indices():
            return None
        return self._selected

    def selected_item(self) -> Optional[ListItem]:
        indices = self.active_indices()
        if 0 <= self._selected < len(indices):
            return self.items[indices[self._selected]]
        return None

    # =========================================================================
    # Navigation
    # =========================================================================

    def move_up(self) -> None:
        if self._selected > 0:
            self._selected -= 1
            self._adjust_scroll()

    def move_down(self) -> None:
        if self._selected < len(self.active_indices()) - 1:
            self._selected += 1
            self._adjust_scroll()

    def move_to_top(self) -> None:
        self._selected = 0
        self.scroll = 0

    def move_to_bottom(self) -> None:
        count = len(self.active_indices())
        if count:
            self._selected = count - 1
            self._adjust_scroll()

    def set_viewport_height(self, height: int) -> None:
        """Set how many item rows are visible and keep the selection in view."""
        self.height = max(0, height)
        self._adjust_scroll()

    def _adjust_scroll(self) -> None:
        """Scroll as little as needed so the selection is in [scroll, scroll + height)."""
        if self.height <= 0:
            return
        if self._selected < self.scroll:
            self.scroll = self._selected
        if self._selected >= self.scroll + self.height:
            self.scroll = self._selected - self.height + 1
        max_scroll = max(0, len(self.active_indices()) - self.height)
        self.scroll = min(max(0, self.scroll), max_scroll)

    # =========================================================================
    # Filtering
    # =========================================================================

    def set_filter(self, query: str) -> None:
        """Filter by `query` and move the selection back to the top."""
        self.filter_query = query
        if query:
            needle = query.lower()
            self._filtered = [
                index for index, item in enumerate(self.items)
                if needle in item.label.lower()
            ]
        else:
            self._filtered = None
        self._selected = 0
        self.scroll = 0

    def clear_filter(self) -> None:
        self.filter_query = ""
        self._filtered = None
        self._selected = 0
        self.scroll = 0

    def enter_filter_mode(self) -> None:
        self.filter_mode = True

    def exit_filter_mode(self) -> None:
        """Leave filter mode, dropping the query."""
        self.filter_mode = False
        self.clear_filter()

    def toggle_filter_mode(self) -> None:
        if self.filter_mode:
            self.exit_filter_mode()
        else:
            self.enter_filter_mode()

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, start_row: int, start_col: int, width: int, height: int) -> None:
        """Draw title, optional filter prompt, rule and the visible rows."""
        term = self.terminal
        self.set_viewport_height(height - CHROME_ROWS)

        indices = self.active_indices()
        if self.is_filtered:
            title = f"{self.title} (filtered: {len(indices)}/{len(self.items)})"
        else:
            title = f"{self.title} ({len(self.items)})"
        term.move_cursor(start_row, start_col)
        term.write(style(title, Colors.BOLD, Colors.YELLOW))

        if self.filter_mode:
            term.move_cursor(start_row, max(start_col, width - 30))
            term.write(style(f"{self.search_icon} ", Colors.DIM))
            term.write(self.filter_query)
            term.write(style(self.CURSOR, Colors.BLINK))

        term.move_cursor(start_row + 1, start_col)
        term.write(style(self.RULE * max(0, width - start_col - 1), Colors.DIM))

        row = start_row + HEADER_ROWS
        if not indices:
            placeholder = "No matches" if self.is_filtered and self.items else "No items"
            term.move_cursor(row, start_col + 2)
            term.write(style(placeholder, Colors.DIM))
            return

        visible_end = min(self.scroll + self.height, len(indices))
        row_width = max(0, width - start_col - 1)
        for position in range(self.scroll, visible_end):
            item = self.items[indices[position]]
            line = f"{item.icon} {truncate(item.label, width - start_col - 10)}"
            term.move_cursor(row, start_col)
            if position == self._selected:
                if item.sublabel:
                    line = f"{line}  {item.sublabel}"
                term.write(style(pad(line, row_width), Colors.REVERSE))
            else:
                term.write(line)
                if item.sublabel:
                    term.write(style(f"  {item.sublabel}", Colors.DIM))
            row += 1

        if self.scroll > 0:
            term.move_cursor(start_row + HEADER_ROWS, width - 2)
            term.write(style("▲", Colors.YELLOW))
        if visible_end < len(indices):
            term.move_cursor(start_row + self.height + 1, width - 2)
            term.write(style("▼", Colors.YELLOW))
