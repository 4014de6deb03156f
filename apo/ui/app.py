"""Interactive dashboard controller.

State machine over the views:
- DASHBOARD, BOARDS, PIPELINES, REPOS, PULL_REQUESTS: top-level tabs
- COPILOT: question input, Escape always returns to DASHBOARD
- WORK_ITEM_DETAIL, PR_DETAIL: opened with Enter from BOARDS / PULL_REQUESTS,
  Escape or b returns to the view they were opened from

Layout: Header | Tabs | Content | Status | Help

One thread owns the terminal. Data is fetched on a daemon refresh thread,
at most one at a time, and applied to the shared snapshot under its lock.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Optional

from ..agent import Agent
from ..config import Config
from ..domain import PullRequest, WorkItem
from ..exceptions import ApiError
from ..formatters.symbols import Symbols, SymbolsFormatter
from . import snapshot as categories
from .components import StatusBar, Tab, TabBar
from .snapshot import DataSnapshot
from .style import Colors, display_width, style
from .terminal import Key, KeyType, Terminal
from .views import (
    BoardsView,
    CopilotView,
    DashboardView,
    PipelinesView,
    PRDetailView,
    PullRequestsView,
    ReposView,
    View,
    ViewContext,
    ViewId,
    WorkItemDetailView,
)

logger = logging.getLogger(__name__)

TITLE = "╔═══ Azure Prod Ops ═══╗"

# (view, tab name, shortcut, icon) in tab-bar order
TABS = [
    (ViewId.DASHBOARD, "Dashboard", "1", Symbols.Home),
    (ViewId.BOARDS, "Boards", "2", Symbols.Clipboard),
    (ViewId.PIPELINES, "Pipelines", "3", Symbols.Wrench),
    (ViewId.REPOS, "Repos", "4", Symbols.Folder),
    (ViewId.PULL_REQUESTS, "PRs", "5", Symbols.Merge),
    (ViewId.COPILOT, "Copilot", "/", Symbols.Robot),
]

SHORTCUTS = {key: view_id for view_id, _, key, _ in TABS}
SHORTCUTS[":"] = ViewId.COPILOT

# Key bindings per state
COPILOT_HELP = " [Enter] Send │ [Esc] Back │ [Ctrl+C] Quit "
DETAIL_HELP = " [Esc/b] Back │ [q] Quit "
FILTER_HELP = " [Enter] Apply │ [Esc] Cancel │ Type to filter... "
DEFAULT_HELP = (
    " [1-5] Tab │ [/] Copilot │ [↑↓/jk] Navigate │ [Enter] Details │"
    " [f] Filter │ [r] Refresh │ [q] Quit "
)

HEADER_ROW = 1
TAB_ROW = 3
CONTENT_START_ROW = 5
# Rows taken by header, tabs, status and help
CHROME_ROWS = 7

DEFAULT_REDRAW_INTERVAL = 1.0


class App:
    """Owns the snapshot, the widgets, every view and the refresh worker."""

    def __init__(
        self,
        config: Config,
        client: Any,
        agent: Optional[Agent] = None,
        terminal: Optional[Terminal] = None,
        symbols: Optional[SymbolsFormatter] = None,
        redraw_interval: float = DEFAULT_REDRAW_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the dashboard.

        Args:
            config: Connection settings; organization, token and project are required
            client: Data client (AzureDevOpsClient or a compatible object)
            agent: Query agent for the Copilot view (built from `client` if omitted)
            terminal: Terminal driver (stdin/stdout if omitted)
            symbols: Icon resolver
            redraw_interval: Seconds between idle wake-ups of the main loop
            clock: Monotonic clock used for transient status messages

        Raises:
            ConfigError: If a required setting is missing
        """
        config.validate_with_project()
        self.config = config
        self.client = client
        self.agent = agent or Agent(client)
        self.terminal = terminal or Terminal()
        self.symbols = symbols or SymbolsFormatter()
        self.redraw_interval = redraw_interval

        self.snapshot = DataSnapshot()
        self.context = ViewContext(self.terminal, self.snapshot, self.symbols)

        self.tab_bar = TabBar(self.terminal, [
            Tab(view_id, name, key, self.symbols.get(icon))
            for view_id, name, key, icon in TABS
        ])
        self.status_bar = StatusBar(self.terminal, clock=clock)

        self.dashboard = DashboardView(self.context)
        self.boards = BoardsView(self.context)
        self.pipelines = PipelinesView(self.context)
        self.repos = ReposView(self.context)
        self.pull_requests = PullRequestsView(self.context)
        self.copilot = CopilotView(self.context, self.agent)
        self.work_item_detail = WorkItemDetailView(
            self.context, config.api_url, config.organization, config.project
        )
        self.pr_detail = PRDetailView(
            self.context, config.api_url, config.organization, config.project
        )
        self.views: dict[ViewId, View] = {
            view.view_id: view
            for view in (
                self.dashboard, self.boards, self.pipelines, self.repos,
                self.pull_requests, self.copilot, self.work_item_detail, self.pr_detail,
            )
        }

        self.current = ViewId.DASHBOARD
        self.previous = ViewId.DASHBOARD
        self.running = False

        self._refresh_thread: Optional[threading.Thread] = None
        self._redraw = threading.Event()
        self._shown_message = ""

    @property
    def current_view(self) -> View:
        return self.views[self.current]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def run(self) -> None:
        """Take over the terminal until the user quits.

        Raises:
            TerminalError: If the terminal cannot be switched to raw mode
        """
        term = self.terminal
        term.enable_raw_mode()
        try:
            term.hide_cursor()
            term.clear_screen()
            self.running = True
            self.current_view.on_enter()
            self.status_bar.set_message("Loading...")
            self.request_refresh()
            self._main_loop()
        finally:
            term.clear_screen()
            term.show_cursor()
            term.flush()
            term.disable_raw_mode()

    def _main_loop(self) -> None:
        """Render, wait for a key, dispatch it."""
        self.render()
        while self.running:
            try:
                key = self.terminal.read_key(timeout=self.redraw_interval)
            except EOFError:
                logger.debug("input closed, leaving dashboard")
                break
            except OSError as e:
                logger.debug("reading key failed: %s", e)
                continue

            if key is None:
                # Idle wake-up: repaint only when something visible changed
                if self._redraw.is_set() or self._message_changed():
                    self.render()
                continue

            self.handle_key(key)
            if self.running:
                self.render()

    def quit(self) -> None:
        self.running = False

    # =========================================================================
    # Input
    # =========================================================================

    def handle_key(self, key: Key) -> None:
        """Dispatch a key: interrupt, back-navigation, the view, then global bindings."""
        if key.type == KeyType.INTERRUPT:
            self.quit()
            return

        if key.type == KeyType.ESCAPE:
            if self.current.is_detail:
                self.go_back()
                return
            if self.current == ViewId.COPILOT:
                self.switch_to_view(ViewId.DASHBOARD)
                return

        if self.current_view.handle_key(key):
            return

        if key.type == KeyType.ENTER:
            self._open_selected()
        elif key.type == KeyType.TAB:
            if not self.current.is_detail:
                self.tab_bar.next()
                self._switch_to_tab_view()
        elif key.type == KeyType.CHAR:
            self._handle_global_char(key.char)

    def _handle_global_char(self, char: str) -> None:
        if char in ("q", "Q"):
            self.quit()
        elif char in ("r", "R"):
            self.request_refresh()
        elif self.current.is_detail:
            if char == "b":
                self.go_back()
        elif char in SHORTCUTS:
            self.switch_to_view(SHORTCUTS[char])

    def _open_selected(self) -> None:
        if self.current == ViewId.BOARDS:
            item = self.boards.selected_work_item()
            if item is not None:
                self.show_work_item_detail(item)
        elif self.current == ViewId.PULL_REQUESTS:
            pr = self.pull_requests.selected_pull_request()
            if pr is not None:
                self.show_pr_detail(pr)

    # =========================================================================
    # Navigation
    # =========================================================================

    def switch_to_view(self, view_id: ViewId) -> None:
        """Make `view_id` current, remembering the view it replaces."""
        if view_id == self.current:
            return
        self.current_view.on_exit()
        self.previous = self.current
        self.current = view_id
        self.tab_bar.set_active_by_id(view_id)
        self.current_view.on_enter()

    def go_back(self) -> None:
        self.switch_to_view(self.previous)

    def _switch_to_tab_view(self) -> None:
        tab = self.tab_bar.active_tab()
        if tab is not None:
            self.switch_to_view(tab.id)

    def show_work_item_detail(self, item: WorkItem) -> None:
        self.work_item_detail.set_work_item(item)
        self.switch_to_view(ViewId.WORK_ITEM_DETAIL)

    def show_pr_detail(self, pr: PullRequest) -> None:
        self.pr_detail.set_pull_request(pr)
        self.switch_to_view(ViewId.PR_DETAIL)

    # =========================================================================
    # Refresh
    # =========================================================================

    def request_refresh(self) -> bool:
        """Start a refresh cycle on a background thread.

        The thread is a daemon so quitting never waits for slow fetches.

        Returns:
            False if a cycle is already in flight and this request was dropped
        """
        if self._refresh_thread is not None and self._refresh_thread.is_alive():
            self.status_bar.set_message("Refresh already in progress")
            return False
        self.status_bar.set_message("Refreshing...")
        self._refresh_thread = threading.Thread(
            target=self._refresh_worker, name="apo-refresh", daemon=True
        )
        self._refresh_thread.start()
        return True

    def _refresh_worker(self) -> None:
        try:
            self.refresh_data()
        except Exception as e:
            logger.exception("refresh failed")
            self.status_bar.set_message(f"Refresh failed: {e}")
            self._redraw.set()

    def refresh_data(self) -> None:
        """Fetch every category and apply the results in one critical section.

        A category whose fetch raises ApiError keeps its previous value and is
        recorded in snapshot.failed_categories.
        """
        snapshot = self.snapshot
        client = self.client
        with snapshot.lock:
            snapshot.loading = True
        self._redraw.set()

        fetchers = [
            (categories.WORK_ITEMS, "work_items", client.get_my_work_items),
            (categories.BUILDS, "builds", lambda: client.list_builds("", "", 20)),
            (categories.PIPELINES, "pipelines", client.list_pipelines),
            (categories.REPOSITORIES, "repositories", client.list_repositories),
            (categories.PULL_REQUESTS, "pull_requests",
             lambda: client.get_active_pull_requests(20)),
        ]

        results: dict[str, list] = {}
        failed: list[str] = []
        try:
            for category, attr, fetch in fetchers:
                try:
                    results[attr] = fetch()
                except ApiError as e:
                    logger.warning("refreshing %s failed: %s", category, e)
                    failed.append(category)
        except Exception:
            with snapshot.lock:
                snapshot.loading = False
            self._redraw.set()
            raise

        now = datetime.now()
        with snapshot.lock:
            for attr, value in results.items():
                setattr(snapshot, attr, value)
            snapshot.failed_categories = failed
            snapshot.last_refresh = now
            snapshot.version += 1
            snapshot.loading = False
        logger.debug("refresh applied, %d categories failed", len(failed))
        self._redraw.set()

        self.status_bar.set_last_refresh(now)
        self.status_bar.set_message("Data refreshed")

    # =========================================================================
    # Rendering
    # =========================================================================

    def help_text(self) -> str:
        if self.current == ViewId.COPILOT:
            return COPILOT_HELP
        if self.current.is_detail:
            return DETAIL_HELP
        if self.current_view.is_filter_mode():
            return FILTER_HELP
        return DEFAULT_HELP

    def _message_changed(self) -> bool:
        return self.status_bar.visible_message() != self._shown_message

    def render(self) -> None:
        """Clear the screen and repaint the whole frame."""
        self._redraw.clear()
        term = self.terminal
        rows, columns = term.query_size()

        term.clear_screen()
        self._render_header(columns)

        if not self.current.is_detail:
            self.tab_bar.render(TAB_ROW, 1, columns)

        content_height = rows - CHROME_ROWS
        with self.snapshot.lock:
            if self.snapshot.loading:
                self._render_loading(columns, content_height)
            else:
                self.current_view.render(CONTENT_START_ROW, columns, content_height)

        self.status_bar.set_help(self.help_text())
        self._shown_message = self.status_bar.visible_message()
        self.status_bar.render(rows - 2, columns)
        term.flush()

    def _render_header(self, width: int) -> None:
        term = self.terminal
        padding = max(0, (width - display_width(TITLE)) // 2)
        term.move_cursor(HEADER_ROW, 1)
        term.write(" " * padding)
        term.write(style(TITLE, Colors.BOLD, Colors.CYAN))

        org_info = f"  {self.config.organization}/{self.config.project}"
        term.move_cursor(HEADER_ROW, width - display_width(org_info) - 1)
        term.write(style(org_info, Colors.DIM))

    def _render_loading(self, width: int, height: int) -> None:
        text = f"{self.symbols.get(Symbols.Hourglass)} Loading..."
        self.terminal.move_cursor(
            CONTENT_START_ROW + height // 2, max(1, (width - display_width(text)) // 2)
        )
        self.terminal.write(style(text, Colors.YELLOW, Colors.BOLD))
