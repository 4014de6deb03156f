"""Dashboard: my work items, recent builds and active pull requests at a glance."""

from ...formatters.symbols import Symbols, build_icon, pull_request_icon, work_item_icon
from ..style import Colors, style, truncate
from .base import View, ViewId


class DashboardView(View):
    view_id = ViewId.DASHBOARD
    title = "Dashboard"

    def _heading(self, row: int, col: int, symbol, text: str) -> None:
        self.terminal.move_cursor(row, col)
        self.terminal.write(
            style(f"{self.context.symbols.get(symbol)} {text}", Colors.BOLD, Colors.YELLOW)
        )

    def _placeholder(self, row: int, col: int, text: str) -> None:
        self.terminal.move_cursor(row, col)
        self.terminal.write(style(text, Colors.DIM))

    def render(self, start_row: int, width: int, height: int) -> None:
        term = self.terminal
        symbols = self.context.symbols
        snapshot = self.context.snapshot

        col_width = (width - 4) // 2
        half_height = (height - 2) // 2
        right_col = col_width + 3

        # Work items, left column
        self._heading(start_row, 2, Symbols.Clipboard, "My Work Items")
        row = start_row + 1
        for item in snapshot.work_items[:max(0, half_height - 1)]:
            term.move_cursor(row, 2)
            icon = symbols.get(work_item_icon(item.type))
            term.write(f"{icon} #{item.id} {truncate(item.title, col_width - 15)}")
            row += 1
        if not snapshot.work_items:
            self._placeholder(row, 4, "No work items")

        # Builds, right column
        self._heading(start_row, right_col, Symbols.Wrench, "Recent Builds")
        row = start_row + 1
        for build in snapshot.builds[:max(0, half_height - 1)]:
            term.move_cursor(row, right_col)
            icon = symbols.get(build_icon(build.result))
            name = truncate(build.definition.name, col_width - 15)
            term.write(f"{icon} #{build.build_number} {name}")
            row += 1
        if not snapshot.builds:
            self._placeholder(row, right_col + 2, "No builds")

        # Pull requests, full width below
        pr_row = start_row + half_height + 1
        self._heading(pr_row, 2, Symbols.Merge, "Active Pull Requests")
        row = pr_row + 1
        for pr in snapshot.pull_requests[:max(0, half_height - 2)]:
            term.move_cursor(row, 2)
            icon = symbols.get(pull_request_icon(pr.is_draft))
            term.write(f"{icon} #{pr.pull_request_id} {truncate(pr.title, width - 20)}")
            row += 1
        if not snapshot.pull_requests:
            self._placeholder(row, 4, "No active PRs")

        if snapshot.failed_categories:
            failed = ", ".join(snapshot.failed_categories)
            self._placeholder(
                start_row + height - 1, 2, truncate(f"Failed to refresh: {failed}", width - 4)
            )
